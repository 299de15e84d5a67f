"""
Data models shared by the note-to-block pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Any, Dict, Optional, Tuple


class BlockType(str, Enum):
    """Block kinds understood by the publishing backend. Values are wire names."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    IMAGE = "image"
    LIST = "list"
    TABLE = "table"
    CODE = "code"
    QUOTE = "quote"
    SEPARATOR = "separator"
    SPACER = "spacer"
    ALERT = "alert"
    PRESERVED = "preserved"


class AlertCategory(str, Enum):
    """Presentation categories an alert block can take."""

    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


# Every callout keyword the extractor recognises.
CALLOUT_KINDS: Tuple[str, ...] = (
    "info+",
    "info",
    "warning",
    "note",
    "tip",
    "caution",
    "danger",
    "success",
    "failure",
    "bug",
    "example",
    "quote",
    "cite",
    "abstract",
    "summary",
    "tldr",
    "question",
    "help",
    "faq",
    "error",
)

# Kinds missing from this table fall back to AlertCategory.INFO.
CALLOUT_CATEGORIES: Dict[str, AlertCategory] = {
    "warning": AlertCategory.WARNING,
    "caution": AlertCategory.WARNING,
    "danger": AlertCategory.WARNING,
    "success": AlertCategory.SUCCESS,
    "error": AlertCategory.ERROR,
    "failure": AlertCategory.ERROR,
}

ALIGNMENTS: Tuple[str, ...] = ("center", "left", "right")


@dataclass(frozen=True)
class EmbedReference:
    """
    One ``![[...]]`` embed seen while parsing, as handed to ``on_embed``.
    """
    src: str
    width: Optional[str] = None
    height: Optional[str] = None


@dataclass(frozen=True)
class CalloutMatch:
    """Result of parsing a ``[!kind] title`` marker out of a fragment."""
    kind: str
    title: str
    body: str

    @property
    def category(self) -> AlertCategory:
        return CALLOUT_CATEGORIES.get(self.kind, AlertCategory.INFO)


@dataclass
class ContentBlock:
    """
    One block of the output sequence.

    ``attributes`` is rendered as the compact JSON payload next to the block
    delimiter; an empty dict means the delimiter carries no payload.  For
    ``BlockType.PRESERVED`` blocks ``body`` holds the verbatim source text,
    delimiters included, and ``preserved_type`` the wire name found in it.
    """
    block_type: BlockType
    body: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    preserved_type: Optional[str] = None

    @property
    def type_name(self) -> str:
        """Wire name of the block (``quote``, ``paragraph`` ...)."""
        if self.block_type is BlockType.PRESERVED and self.preserved_type:
            return self.preserved_type
        return self.block_type.value

    @property
    def attributes_payload(self) -> str:
        if not self.attributes:
            return ""
        return " " + json.dumps(self.attributes, separators=(",", ":"), ensure_ascii=False)

    def is_preserved(self) -> bool:
        return self.block_type is BlockType.PRESERVED


@dataclass
class ImageReference:
    """
    An image reference found in raw note text.

    ``embed`` is True for the ``![[name|opts]]`` form and False for the
    standard ``![alt|WxH](path)`` form.  ``start``/``end`` are offsets of
    ``original`` in the scanned text.
    """
    original: str
    src: str
    start: int
    end: int
    embed: bool
    is_url: bool = False
    alt: str = ""
    width: Optional[str] = None
    height: Optional[str] = None
    options: Tuple[str, ...] = ()


@dataclass
class Media:
    """Binary payload prepared for an uploader."""
    file_name: str
    mime_type: str
    content: bytes
