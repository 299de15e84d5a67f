"""Test note markdown to HTML rendering."""

from notepress.markdown_parser import MarkdownParser


def test_basic_markdown_parsing():
    """Test basic markdown to HTML conversion."""
    parser = MarkdownParser()

    markdown_text = """# Hello World

This is a paragraph.

## Section 2

- Item 1
- Item 2"""

    html = parser.parse(markdown_text)

    assert "<h1>Hello World</h1>" in html
    assert "<h2>Section 2</h2>" in html
    assert "<p>This is a paragraph.</p>" in html
    assert "<ul>" in html
    assert "<li>Item 1</li>" in html


def test_table_parsing():
    """Tables are enabled on top of the commonmark preset."""
    parser = MarkdownParser()

    html = parser.parse("| Name | Age |\n|------|-----|\n| John | 25  |")

    assert "<table>" in html
    assert "<th>Name</th>" in html
    assert "<td>John</td>" in html


def test_strikethrough():
    html = MarkdownParser().parse("~~gone~~")
    assert "<s>gone</s>" in html


def test_embeds_are_rendered():
    html = MarkdownParser().parse("![[diagram.png|640x480]]")
    assert html == '<p><img src="diagram.png" width="640" height="480" alt=""></p>\n'


def test_on_embed_is_forwarded():
    seen = []
    MarkdownParser(on_embed=seen.append).parse("text ![[a.png|10]]")
    assert [(ref.src, ref.width) for ref in seen] == [("a.png", "10")]


def test_front_matter_is_not_rendered():
    parser = MarkdownParser()
    note = "---\ntitle: Hello\ncategories: [1]\n---\n\nBody text"

    html = parser.parse(note)

    assert "title: Hello" not in html
    assert "<p>Body text</p>" in html
    assert parser.front_matter(note) == "title: Hello\ncategories: [1]"


def test_front_matter_absent():
    assert MarkdownParser().front_matter("# Just a note") == ""


def test_front_matter_does_not_fire_on_embed():
    seen = []
    parser = MarkdownParser(on_embed=seen.append)

    parser.front_matter("---\ntitle: Hello\n---\n\n![[a.png]]")

    assert seen == []


def test_highlight():
    html = MarkdownParser().parse("This is ==highlighted== and ==twice==.")
    assert html == "<p>This is <mark>highlighted</mark> and <mark>twice</mark>.</p>\n"


def test_highlight_nests_inline_markup():
    html = MarkdownParser().parse("==**bold** move==")
    assert html == "<p><mark><strong>bold</strong> move</mark></p>\n"


def test_highlight_skips_code():
    parser = MarkdownParser()
    text = "Use `a ==b==` here\n\n```\nx ==y==\n```\n\n==after=="

    html = parser.parse(text)

    assert "<code>a ==b==</code>" in html
    assert "<pre><code>x ==y==\n</code></pre>" in html
    assert "<p><mark>after</mark></p>" in html


def test_highlight_skips_indented_code():
    html = MarkdownParser().parse("para\n\n    x ==y== z\n")
    assert html == "<p>para</p>\n<pre><code>x ==y== z\n</code></pre>\n"


def test_highlight_skips_raw_html_blocks():
    html = MarkdownParser().parse("<div>\na ==b== c\n</div>")
    assert "<mark>" not in html
    assert "a ==b== c" in html


def test_highlight_needs_tight_markers():
    html = MarkdownParser().parse("if a == b and c == d")
    assert html == "<p>if a == b and c == d</p>\n"


def test_unclosed_highlight_is_text():
    html = MarkdownParser().parse("==open")
    assert html == "<p>==open</p>\n"


def test_pre_existing_blocks_pass_through():
    html = MarkdownParser().parse("<!-- wp:paragraph -->\n<p>kept</p>\n<!-- /wp:paragraph -->")
    assert "<!-- wp:paragraph -->" in html
    assert "<!-- /wp:paragraph -->" in html
