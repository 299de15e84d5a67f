#!/usr/bin/env python3
"""
Main converter module that ties the markdown parser and block segmenter together.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from .assembler import assemble
from .markdown_parser import MarkdownParser
from .media import Resolver, rewrite_images
from .models import EmbedReference
from .segmenter import BlockSegmenter

logger = logging.getLogger(__name__)


class NoteConverter:
    """
    Convert note markdown into WordPress block markup.
    """

    def __init__(
        self,
        *,
        on_embed: Optional[Callable[[EmbedReference], None]] = None,
        resolve_media: Optional[Resolver] = None,
        image_id_start: int = 1,
        debug: bool = False,
    ):
        """Create a new :class:`NoteConverter`.

        Parameters
        ----------
        on_embed
            Observer called with every ``![[...]]`` embed found while the
            note is rendered.
        resolve_media
            Maps a local image source to its public URL before rendering.
            ``None`` leaves image references untouched.
        image_id_start
            First id handed to synthesized image blocks.
        debug
            Log a summary of every conversion.
        """
        self.debug = debug
        self.resolve_media = resolve_media
        self.markdown_parser = MarkdownParser(on_embed=on_embed)
        self.segmenter = BlockSegmenter(image_id_start=image_id_start)

    def convert(self, markdown_text: str) -> str:
        """
        Convert a note to block markup.

        Args:
            markdown_text: Raw note content, front matter included

        Returns:
            str: Blocks separated by blank lines
        """
        if self.resolve_media is not None:
            markdown_text = rewrite_images(markdown_text, self.resolve_media)

        # Step 1: markdown (with embeds) to HTML
        html = self.markdown_parser.parse(markdown_text)

        # Step 2: HTML to ordered blocks
        blocks = self.segmenter.segment(html)

        if self.debug:
            preserved = sum(1 for block in blocks if block.is_preserved())
            logger.info(f"Converted note into {len(blocks)} blocks ({preserved} preserved)")

        return assemble(blocks)


def main(argv=None):
    """Command-line entry point for the note converter."""
    import argparse
    import sys

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="notepress", description="Convert an Obsidian note to WordPress block markup.")
        p.add_argument("note", type=Path, help="Markdown note to convert")
        p.add_argument("--output", "-o", type=Path, help="Destination file (default: stdout)")
        p.add_argument("--image-id-start", type=int, default=1, help="First id used for image blocks")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")
        return p

    args = _build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="%(levelname)s  %(message)s")

    note_path: Path = args.note
    if not note_path.exists():
        logger.error(f"Note '{note_path}' not found")
        sys.exit(1)

    converter = NoteConverter(image_id_start=args.image_id_start, debug=args.debug)
    markup = converter.convert(note_path.read_text(encoding="utf-8"))

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(markup + "\n", encoding="utf-8")
        logger.info("✅ Block markup written to %s", args.output)
    else:
        sys.stdout.write(markup + "\n")


if __name__ == "__main__":
    main()
