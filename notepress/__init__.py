"""
notepress - publish Obsidian notes as WordPress block markup.
"""

from .assembler import assemble, convert_to_blocks, parse_blocks, serialize_block
from .callouts import build_alert_block, extract_callout
from .converter import NoteConverter
from .markdown_parser import MarkdownParser
from .models import AlertCategory, BlockType, CalloutMatch, ContentBlock, EmbedReference
from .segmenter import BlockSegmenter

__version__ = "0.1.0"
__all__ = [
    "NoteConverter",
    "MarkdownParser",
    "BlockSegmenter",
    "assemble",
    "convert_to_blocks",
    "parse_blocks",
    "serialize_block",
    "extract_callout",
    "build_alert_block",
    "AlertCategory",
    "BlockType",
    "CalloutMatch",
    "ContentBlock",
    "EmbedReference",
]
