from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline

MARKER = "=="


def highlight_plugin(md: MarkdownIt):
    """Markdown-it-py plugin for Obsidian highlights: ``==text==`` renders as
    ``<mark>text</mark>``.

    The content is parsed as inline markdown, so ``==**bold**==`` nests.
    Markers must hug the text: ``a == b`` is left alone.  Code spans,
    code blocks and raw HTML never reach inline rules, so they keep their
    ``==`` literally.
    """

    def _highlight_inline(state: StateInline, silent: bool):
        start = state.pos
        maximum = state.posMax

        if not state.src.startswith(MARKER, start):
            return False
        # Pairs are not validated inside link labels
        if silent:
            return False

        state.pos = start + len(MARKER)
        found = False
        while state.pos < maximum:
            if state.src.startswith(MARKER, state.pos) and state.pos + len(MARKER) <= maximum:
                found = True
                break
            state.md.inline.skipToken(state)

        content = state.src[start + len(MARKER):state.pos]
        if not found or not content or content[0].isspace() or content[-1].isspace():
            state.pos = start
            return False

        close = state.pos
        state.posMax = close
        state.pos = start + len(MARKER)

        token = state.push("mark_open", "mark", 1)
        token.markup = MARKER
        state.md.inline.tokenize(state)
        token = state.push("mark_close", "mark", -1)
        token.markup = MARKER

        state.pos = close + len(MARKER)
        state.posMax = maximum
        return True

    md.inline.ruler.after("emphasis", "highlight", _highlight_inline)
