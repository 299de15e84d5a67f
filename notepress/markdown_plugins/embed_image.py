import logging
import re
from typing import Callable, Dict, Iterable, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_inline import StateInline

from ..models import ALIGNMENTS, EmbedReference

logger = logging.getLogger(__name__)

TOKEN_TYPE = "embed_image"

EMBED_RE = re.compile(r"!\[\[([^|\]\n]+)((?:\|[^|\]\n]+)*)\]\]")
_SIZE_RE = re.compile(r"^(\d+)x(\d+)$")
_WIDTH_RE = re.compile(r"^\d+$")


def parse_embed_options(options: Iterable[str]) -> Dict[str, str]:
    """Classify ``|``-separated embed options into width/height/align.

    Later alignment keywords override earlier ones; unknown options are
    ignored.
    """
    parsed: Dict[str, str] = {}
    for opt in options:
        if opt in ALIGNMENTS:
            parsed["align"] = opt
        elif _SIZE_RE.match(opt):
            parsed["width"], parsed["height"] = opt.split("x")
        elif _WIDTH_RE.match(opt):
            parsed["width"] = opt
    return parsed


def embed_image_plugin(md: MarkdownIt, on_embed: Optional[Callable[[EmbedReference], None]] = None):
    """Markdown-it-py plugin for Obsidian embeds: ``![[name]]``,
    ``![[name|300]]``, ``![[name|300x200]]`` and ``![[name|center]]``.

    *on_embed* is called with an :class:`EmbedReference` for every embed
    parsed, on the same call stack as the render pass.
    """

    def _embed_inline(state: StateInline, silent: bool):
        match = EMBED_RE.match(state.src, state.pos, state.posMax)
        if not match:
            return False

        # The link-label scanner relies on silent rules moving the cursor.
        if silent:
            state.pos += len(match.group(0))
            return True

        src = match.group(1)
        options = match.group(2).split("|")[1:] if match.group(2) else []
        parsed = parse_embed_options(options)

        token = state.push(TOKEN_TYPE, "img", 0)
        token.markup = match.group(0)
        token.attrSet("src", src)
        for name in ("width", "height", "align"):
            if name in parsed:
                token.attrSet(name, parsed[name])

        logger.debug("Embed %s with options %s", src, parsed)
        if on_embed is not None:
            on_embed(EmbedReference(src=src, width=parsed.get("width"), height=parsed.get("height")))

        state.pos += len(match.group(0))
        return True

    def _render_embed(self, tokens, idx, options, env):
        token = tokens[idx]
        src = escapeHtml(str(token.attrGet("src") or ""))
        width = token.attrGet("width")
        height = token.attrGet("height")
        align = token.attrGet("align")

        if align:
            # Alignment wins: dimensions only survive as inline style.
            style = ""
            if width:
                style += f"width:{width}px;"
            if height:
                style += f"height:{height}px;"
            return f'<figure class="wp-block-image align{align}"><img src="{src}" style="{style}" alt=""/></figure>'

        if width and height:
            return f'<img src="{src}" width="{width}" height="{height}" alt="">'
        if width:
            return f'<img src="{src}" width="{width}" alt="">'
        return f'<img src="{src}" alt="">'

    # After the standard image rule so ``![alt](src)`` keeps priority
    md.inline.ruler.after("image", TOKEN_TYPE, _embed_inline)
    md.add_render_rule(TOKEN_TYPE, _render_embed)
