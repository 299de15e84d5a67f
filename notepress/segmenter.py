"""
Block segmenter: re-partitions rendered HTML into WordPress blocks.

The segmenter works line by line over the HTML markdown-it produces rather
than building a DOM.  Regions that are already wrapped in ``<!-- wp:... -->``
comments are passed through untouched; everything else is fed through an
ordered list of rules, each of which either declines or returns the blocks
it produced and the number of lines it consumed.
"""
import itertools
import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional, Tuple

from bs4 import BeautifulSoup
from markdown_it.common.utils import escapeHtml

from .callouts import build_alert_block, extract_callout
from .models import ALIGNMENTS, BlockType, ContentBlock

logger = logging.getLogger(__name__)

# Self-closing form first so ``<!-- wp:spacer /-->`` is never read as an opener.
# Attributes stay on the delimiter line and never cross a ``-->``.
_ATTRS = r"(?:(?!-->)[^\n])*?"
PRESERVED_BLOCK_RE = re.compile(
    r"<!-- wp:(?P<void>[a-z][a-z0-9_/-]*)(?=\s)" + _ATTRS + r" /-->"
    r"|<!-- wp:(?P<name>[a-z][a-z0-9_/-]*)(?=\s)" + _ATTRS + r" -->.*?<!-- /wp:(?P=name) -->",
    re.DOTALL,
)

_BLOCK_TAGS = r"h[1-6]|p|ul|ol|table|pre|blockquote|figure|div"
_BLOCK_BOUNDARY_RE = re.compile(
    r"(</(?:" + _BLOCK_TAGS + r")>|<hr(?:\s[^>]*)?/?>)[ \t]*(?=<(?:" + _BLOCK_TAGS + r"|hr)(?=[\s>/]))"
)
# Loose text directly before a block tag, as in ``lead<p>para</p>``
_TEXT_BOUNDARY_RE = re.compile(r"(?<=[^\s>])[ \t]*(?=<(?:" + _BLOCK_TAGS + r"|hr)(?=[\s>/]))")

_HEADING_RE = re.compile(r"^\s*<h([1-6])(?:\s[^>]*)?>(.*)</h\1>\s*$")
_HR_RE = re.compile(r"^\s*<hr(?:\s[^>]*)?/?>\s*$")
_BR_RE = re.compile(r"^\s*<br\s*/?>\s*$")
_IMG_ONLY_RE = re.compile(r"^<img\b[^>]*>$")
_FIGURE_IMG_RE = re.compile(r"^<figure\b[^>]*>\s*<img\b[^>]*>\s*</figure>$")
_PX_RE = re.compile(r"(width|height)\s*:\s*(\d+)px")
_RESIDUAL_TAG_RE = re.compile(r"<(?!/?(?:code|strong|em|b|i)\b)[^>]*>")

_MULTILINE_TAGS = ("table", "pre", "ul", "ol", "blockquote", "p")
_OPEN_TAG_RES = {tag: re.compile(r"^\s*<" + tag + r"(?=[\s>])") for tag in _MULTILINE_TAGS}
_TAG_RES = {tag: re.compile(r"<(/?)" + tag + r"(?=[\s>/])") for tag in _MULTILINE_TAGS}

SEPARATOR_BODY = '<hr class="wp-block-separator has-alpha-channel-opacity is-style-wide"/>'
SPACER_HEIGHT = "20px"
SPACER_BODY = f'<div style="height:{SPACER_HEIGHT}" aria-hidden="true" class="wp-block-spacer"></div>'


class RuleMatch(NamedTuple):
    """What a rule produced: blocks, lines consumed and any trailing text
    left on the last consumed line."""
    blocks: List[ContentBlock]
    consumed: int
    remainder: str = ""


@dataclass
class _ScanContext:
    image_ids: Iterator[int] = field(default_factory=lambda: itertools.count(1))


class BlockSegmenter:
    """
    Split an HTML document into an ordered list of :class:`ContentBlock`.
    """

    def __init__(self, image_id_start: int = 1):
        """
        Args:
            image_id_start: First numeric id handed to synthesized image
                blocks.  Ids are counted per :meth:`segment` call.
        """
        self.image_id_start = image_id_start
        self._rules = [
            self._heading_rule,
            self._separator_rule,
            self._table_rule,
            self._code_rule,
            self._unordered_list_rule,
            self._ordered_list_rule,
            self._quote_rule,
            self._paragraph_rule,
            self._spacer_rule,
            self._residual_rule,
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def segment(self, html: str) -> List[ContentBlock]:
        """Segment *html* into blocks, in document order."""
        ctx = _ScanContext(image_ids=itertools.count(self.image_id_start))
        blocks: List[ContentBlock] = []

        for is_preserved, text, block_name in self.partition(html):
            if is_preserved:
                blocks.append(ContentBlock(
                    block_type=BlockType.PRESERVED,
                    body=text,
                    preserved_type=block_name,
                ))
            else:
                blocks.extend(self._segment_raw(text, ctx))

        logger.debug("Segmented %d chars of HTML into %d blocks", len(html), len(blocks))
        return blocks

    def partition(self, html: str) -> List[Tuple[bool, str, Optional[str]]]:
        """
        Split *html* into ``(is_preserved, text, block_name)`` regions.

        Raw regions are trimmed and dropped when blank.  ``block_name`` is
        only set for preserved regions.
        """
        regions: List[Tuple[bool, str, Optional[str]]] = []
        last_index = 0

        for match in PRESERVED_BLOCK_RE.finditer(html):
            raw = html[last_index:match.start()].strip()
            if raw:
                regions.append((False, raw, None))
            regions.append((True, match.group(0), match.group("void") or match.group("name")))
            last_index = match.end()

        raw = html[last_index:].strip()
        if raw:
            regions.append((False, raw, None))
        return regions

    # ------------------------------------------------------------------
    # Raw region scanning
    # ------------------------------------------------------------------
    def _segment_raw(self, html: str, ctx: _ScanContext) -> List[ContentBlock]:
        html = _BLOCK_BOUNDARY_RE.sub("\\1\n", html)
        lines = _TEXT_BOUNDARY_RE.sub("\n", html).split("\n")
        blocks: List[ContentBlock] = []

        i = 0
        while i < len(lines):
            if not lines[i].strip():
                i += 1
                continue

            for rule in self._rules:
                match = rule(lines, i, ctx)
                if match is not None:
                    break

            blocks.extend(match.blocks)
            i += match.consumed
            if match.remainder.strip():
                lines.insert(i, match.remainder)

        return blocks

    def _consume(self, lines: List[str], start: int, tag: str) -> Tuple[str, int, str]:
        """
        Capture from ``lines[start]`` through the ``</tag>`` that closes the
        tag opened there, counting nested tags of the same name.

        Returns ``(fragment, lines_consumed, remainder)``.  An unterminated
        tag captures to the end of input.
        """
        tag_re = _TAG_RES[tag]
        depth = 0

        for idx in range(start, len(lines)):
            line = lines[idx]
            for tag_match in tag_re.finditer(line):
                depth += -1 if tag_match.group(1) else 1
                if depth == 0:
                    close_end = line.find(">", tag_match.end()) + 1 or len(line)
                    captured = lines[start:idx] + [line[:close_end]]
                    return "\n".join(captured).strip(), idx - start + 1, line[close_end:]

        return "\n".join(lines[start:]).strip(), len(lines) - start, ""

    # ------------------------------------------------------------------
    # Rules, in precedence order
    # ------------------------------------------------------------------
    def _heading_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        match = _HEADING_RE.match(lines[i])
        if not match:
            return None
        level, content = match.group(1), match.group(2)
        attributes = {"level": int(level)} if level != "2" else {}
        block = ContentBlock(BlockType.HEADING, f"<h{level}>{content}</h{level}>", attributes)
        return RuleMatch([block], 1)

    def _separator_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _HR_RE.match(lines[i]):
            return None
        block = ContentBlock(BlockType.SEPARATOR, SEPARATOR_BODY, {"className": "is-style-wide"})
        return RuleMatch([block], 1)

    def _table_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _OPEN_TAG_RES["table"].match(lines[i]):
            return None
        fragment, consumed, remainder = self._consume(lines, i, "table")

        has_header = "<thead" in fragment
        has_footer = "<tfoot" in fragment
        logger.debug("Table block: header=%s footer=%s", has_header, has_footer)

        table = re.sub(r"<table(?:\s[^>]*)?>", '<table class="has-fixed-layout">', fragment, count=1)
        body = f'<figure class="wp-block-table">{table}</figure>'
        block = ContentBlock(BlockType.TABLE, body, {"hasFixedLayout": True})
        return RuleMatch([block], consumed, remainder)

    def _code_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _OPEN_TAG_RES["pre"].match(lines[i]):
            return None
        fragment, consumed, remainder = self._consume(lines, i, "pre")

        code = re.sub(r"</?(?:pre|code)(?:\s[^>]*)?>", "", fragment).rstrip("\n")
        body = f'<pre class="wp-block-code"><code>{code}</code></pre>'
        return RuleMatch([ContentBlock(BlockType.CODE, body)], consumed, remainder)

    def _unordered_list_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _OPEN_TAG_RES["ul"].match(lines[i]):
            return None
        fragment, consumed, remainder = self._consume(lines, i, "ul")
        return RuleMatch([ContentBlock(BlockType.LIST, fragment)], consumed, remainder)

    def _ordered_list_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _OPEN_TAG_RES["ol"].match(lines[i]):
            return None
        fragment, consumed, remainder = self._consume(lines, i, "ol")
        block = ContentBlock(BlockType.LIST, fragment, {"ordered": True})
        return RuleMatch([block], consumed, remainder)

    def _quote_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _OPEN_TAG_RES["blockquote"].match(lines[i]):
            return None
        fragment, consumed, remainder = self._consume(lines, i, "blockquote")

        interior = re.sub(r"^<blockquote(?:\s[^>]*)?>", "", fragment, count=1)
        interior = re.sub(r"</blockquote>$", "", interior).strip()

        callout = extract_callout(interior)
        if callout is not None:
            logger.debug("Quote is a %s callout", callout.kind)
            return RuleMatch([build_alert_block(callout)], consumed, remainder)

        body = f'<blockquote class="wp-block-quote">{interior}</blockquote>'
        return RuleMatch([ContentBlock(BlockType.QUOTE, body)], consumed, remainder)

    def _paragraph_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _OPEN_TAG_RES["p"].match(lines[i]):
            return None
        fragment, consumed, remainder = self._consume(lines, i, "p")

        interior = re.sub(r"^<p(?:\s[^>]*)?>", "", fragment, count=1)
        interior = re.sub(r"</p>$", "", interior).strip()

        # An image-only paragraph is never checked for a callout.
        if _IMG_ONLY_RE.match(interior) or _FIGURE_IMG_RE.match(interior):
            block = self._image_block(interior, next(ctx.image_ids))
            if block is not None:
                return RuleMatch([block], consumed, remainder)

        callout = extract_callout(interior)
        if callout is not None:
            logger.debug("Paragraph is a %s callout", callout.kind)
            return RuleMatch([build_alert_block(callout)], consumed, remainder)

        return RuleMatch([ContentBlock(BlockType.PARAGRAPH, f"<p>{interior}</p>")], consumed, remainder)

    def _spacer_rule(self, lines, i, ctx) -> Optional[RuleMatch]:
        if not _BR_RE.match(lines[i]):
            return None
        block = ContentBlock(BlockType.SPACER, SPACER_BODY, {"height": SPACER_HEIGHT})
        return RuleMatch([block], 1)

    def _residual_rule(self, lines, i, ctx) -> RuleMatch:
        text = _RESIDUAL_TAG_RE.sub("", lines[i]).strip()
        if not text:
            return RuleMatch([], 1)
        return RuleMatch([ContentBlock(BlockType.PARAGRAPH, f"<p>{text}</p>")], 1)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _image_block(self, fragment: str, image_id: int) -> Optional[ContentBlock]:
        """Build an image block from a lone ``<img>`` or aligned ``<figure>``."""
        soup = BeautifulSoup(fragment, "html.parser")
        img = soup.find("img")
        if img is None:
            return None

        align = "center"
        figure = soup.find("figure")
        if figure is not None:
            for css_class in figure.get("class", []):
                if css_class.startswith("align") and css_class[5:] in ALIGNMENTS:
                    align = css_class[5:]

        src = escapeHtml(img.get("src", ""))
        alt = escapeHtml(img.get("alt", ""))
        style = img.get("style", "")

        attributes = {"id": image_id, "sizeSlug": "large", "align": align}
        dimensions = {name: img.get(name) for name in ("width", "height") if img.get(name)}
        for name, value in _PX_RE.findall(style):
            dimensions.setdefault(name, value)
        for name, value in dimensions.items():
            if str(value).isdigit():
                attributes[name] = int(value)

        img_attrs = f'src="{src}" alt="{alt}"'
        for name in ("width", "height"):
            if img.get(name):
                img_attrs += f' {name}="{escapeHtml(img.get(name))}"'
        if style:
            img_attrs += f' style="{escapeHtml(style)}"'

        body = (
            f'<figure class="wp-block-image align{align} size-large">'
            f'<img {img_attrs} class="wp-image-{image_id}"/></figure>'
        )
        return ContentBlock(BlockType.IMAGE, body, attributes)
