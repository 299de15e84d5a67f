"""
Markdown parser for Obsidian notes, built on markdown-it-py.
"""
import logging
from typing import Callable, Optional

from markdown_it import MarkdownIt
from mdit_py_plugins.front_matter import front_matter_plugin

from .markdown_plugins import embed_image_plugin, highlight_plugin
from .models import EmbedReference

logger = logging.getLogger(__name__)


class MarkdownParser:
    """
    Stage-one renderer: note markdown in, HTML out.
    """

    def __init__(self, on_embed: Optional[Callable[[EmbedReference], None]] = None):
        """
        Args:
            on_embed: Optional observer called once for every ``![[...]]``
                embed found while rendering.
        """
        self.on_embed = on_embed

        self.markdown_processor = MarkdownIt('commonmark', {
            'html': True,          # Raw HTML and pre-existing block comments pass through
            'linkify': False,
            'typographer': False,
        })
        self.markdown_processor.enable(['table', 'strikethrough'])

        # front_matter_plugin swallows the leading YAML block so it never
        # reaches the published body.
        self.markdown_processor = (
            self.markdown_processor
                .use(front_matter_plugin)
                .use(highlight_plugin)
                .use(embed_image_plugin, on_embed=on_embed)
        )

        # Block-level only, so reading metadata never fires on_embed
        self.front_matter_reader = MarkdownIt('commonmark').use(front_matter_plugin)
        self.front_matter_reader.disable('inline')

    def parse(self, markdown_text: str) -> str:
        """
        Render note markdown to HTML.

        Args:
            markdown_text: Raw note content

        Returns:
            HTML string
        """
        html = self.markdown_processor.render(markdown_text)
        logger.debug("Rendered %d chars of markdown into %d chars of HTML", len(markdown_text), len(html))
        return html

    def front_matter(self, markdown_text: str) -> str:
        """Return the raw YAML front matter of *markdown_text* ('' if absent)."""
        for token in self.front_matter_reader.parse(markdown_text):
            if token.type == "front_matter":
                return token.content
        return ""
