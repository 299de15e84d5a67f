"""markdown-it-py plugins used by the note parser."""
from .embed_image import embed_image_plugin, parse_embed_options
from .highlight import highlight_plugin

__all__ = ["embed_image_plugin", "highlight_plugin", "parse_embed_options"]
