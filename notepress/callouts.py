"""
Callout (``> [!warning] Title``) detection for paragraph and quote fragments.
"""
import re
from typing import Optional

from .models import CALLOUT_KINDS, BlockType, CalloutMatch, ContentBlock

_KIND_ALTERNATION = "|".join(re.escape(kind) for kind in CALLOUT_KINDS)

# The marker opens a line, optionally after the paragraph tag markdown-it
# wrapped around it.  ``[!tip]-`` / ``[!tip]+`` fold markers are accepted.
CALLOUT_RE = re.compile(
    r"^[ \t]*(?:<p(?:\s[^>]*)?>)?[ \t]*\[!(" + _KIND_ALTERNATION + r")\][+-]?[ \t]*([^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)
_PARAGRAPH_TAG_RE = re.compile(r"</?p(?:\s[^>]*)?>")
_TAG_RE = re.compile(r"<[^>]+>")


def extract_callout(fragment: str) -> Optional[CalloutMatch]:
    """Parse the first callout marker in *fragment*.

    Returns ``None`` when the fragment holds no recognised marker, in which
    case the caller renders it normally.
    """
    match = CALLOUT_RE.search(fragment)
    if not match:
        return None

    kind = match.group(1).lower()
    title = _PARAGRAPH_TAG_RE.sub("", match.group(2)).strip()
    if not title:
        title = kind[:1].upper() + kind[1:]

    rest = fragment[:match.start()] + fragment[match.end():]
    body = _PARAGRAPH_TAG_RE.sub("", rest).strip()

    return CalloutMatch(kind=kind, title=title, body=body)


def build_alert_block(callout: CalloutMatch) -> ContentBlock:
    """Render a parsed callout as an ``alert`` block."""
    category = callout.category.value
    body = (
        f'<div class="wp-block-alert is-style-{category}">'
        f'<p class="wp-block-alert__title"><strong>{callout.title}</strong></p>'
        f'<div class="wp-block-alert__content">{callout.body}</div>'
        f'</div>'
    )
    return ContentBlock(
        block_type=BlockType.ALERT,
        body=body,
        attributes={"type": category, "title": _TAG_RE.sub("", callout.title)},
    )
