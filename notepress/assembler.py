"""
Block assembler: serializes content blocks into WordPress block markup.
"""
from typing import Iterable, List

from .models import BlockType, ContentBlock
from .segmenter import BlockSegmenter

BLOCK_SEPARATOR = "\n\n"


def serialize_block(block: ContentBlock) -> str:
    """Serialize one block.  Preserved blocks come back verbatim."""
    if block.is_preserved():
        return block.body
    name = block.type_name
    return f"<!-- wp:{name}{block.attributes_payload} -->\n{block.body}\n<!-- /wp:{name} -->"


def assemble(blocks: Iterable[ContentBlock]) -> str:
    """Join serialized blocks with a blank line, keeping their order."""
    return BLOCK_SEPARATOR.join(serialize_block(block) for block in blocks)


def convert_to_blocks(html: str, *, image_id_start: int = 1) -> str:
    """
    Convert rendered HTML into block markup.

    Args:
        html: Output of a markdown render pass
        image_id_start: First id used for synthesized image blocks

    Returns:
        Block markup ready to publish
    """
    return assemble(BlockSegmenter(image_id_start=image_id_start).segment(html))


def parse_blocks(markup: str) -> List[ContentBlock]:
    """Read serialized block markup back as preserved blocks.

    Text outside any block delimiter is ignored.
    """
    return [
        ContentBlock(BlockType.PRESERVED, text, preserved_type=name)
        for is_preserved, text, name in BlockSegmenter().partition(markup)
        if is_preserved
    ]
