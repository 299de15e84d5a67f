"""Test block serialization and assembly."""

from notepress.assembler import assemble, convert_to_blocks, parse_blocks, serialize_block
from notepress.models import BlockType, ContentBlock


def test_serialize_without_attributes():
    block = ContentBlock(BlockType.PARAGRAPH, "<p>Hello</p>")
    assert serialize_block(block) == "<!-- wp:paragraph -->\n<p>Hello</p>\n<!-- /wp:paragraph -->"


def test_serialize_with_attributes():
    block = ContentBlock(BlockType.HEADING, "<h3>T</h3>", {"level": 3})
    assert serialize_block(block) == '<!-- wp:heading {"level":3} -->\n<h3>T</h3>\n<!-- /wp:heading -->'


def test_attribute_payload_is_compact_json():
    block = ContentBlock(BlockType.IMAGE, "", {"id": 7, "sizeSlug": "large", "align": "center"})
    assert block.attributes_payload == ' {"id":7,"sizeSlug":"large","align":"center"}'


def test_non_ascii_titles_are_kept():
    block = ContentBlock(BlockType.ALERT, "", {"type": "info", "title": "주의"})
    assert block.attributes_payload == ' {"type":"info","title":"주의"}'


def test_preserved_blocks_are_verbatim():
    raw = '<!-- wp:quote -->X<!-- /wp:quote -->'
    block = ContentBlock(BlockType.PRESERVED, raw, preserved_type="quote")
    assert serialize_block(block) == raw


def test_assemble_joins_with_blank_line():
    blocks = [
        ContentBlock(BlockType.PRESERVED, "<!-- wp:quote -->X<!-- /wp:quote -->", preserved_type="quote"),
        ContentBlock(BlockType.PARAGRAPH, "<p>Y</p>"),
    ]
    assert assemble(blocks) == (
        "<!-- wp:quote -->X<!-- /wp:quote -->\n\n"
        "<!-- wp:paragraph -->\n<p>Y</p>\n<!-- /wp:paragraph -->"
    )


def test_assemble_empty():
    assert assemble([]) == ""


def test_convert_to_blocks_end_to_end():
    markup = convert_to_blocks('<h2>Title</h2><p>Hello</p><p><img src="a.png" alt=""></p>')

    assert markup == (
        "<!-- wp:heading -->\n<h2>Title</h2>\n<!-- /wp:heading -->\n\n"
        "<!-- wp:paragraph -->\n<p>Hello</p>\n<!-- /wp:paragraph -->\n\n"
        '<!-- wp:image {"id":1,"sizeSlug":"large","align":"center"} -->\n'
        '<figure class="wp-block-image aligncenter size-large"><img src="a.png" alt="" class="wp-image-1"/></figure>\n'
        "<!-- /wp:image -->"
    )


def test_converting_twice_is_identity():
    html = "<h1>A</h1>\n<p>[!error] Broke</p>\n<ul>\n<li>x</li>\n</ul>\n<hr />\n<br />"

    once = convert_to_blocks(html)
    twice = convert_to_blocks(once)

    assert twice == once


def test_parse_blocks_reads_back_types():
    markup = convert_to_blocks("<h4>A</h4>\n<p>[!tip] T</p>\n<ol>\n<li>x</li>\n</ol>\n<hr>\n<br>")

    blocks = parse_blocks(markup)

    assert [b.type_name for b in blocks] == ["heading", "alert", "list", "separator", "spacer"]
    assert assemble(blocks) == markup


def test_parse_blocks_ignores_loose_text():
    assert parse_blocks("<p>not a block</p>") == []
