"""Image reference discovery and rewriting for note text.

Publishing a note means every local image it references has to be uploaded
first and the reference pointed at the public URL the upload returned.
This module finds those references and rewrites them; the upload itself is
a callable supplied by the caller:

    resolver = upload_resolver(vault_dir, upload=client.upload_media)
    text = rewrite_images(text, resolver)

Both the standard ``![alt|300x200](path)`` form and the Obsidian embed form
``![[name|300|center]]`` are recognised.  Rewritten references always use
the embed form so the sizing options survive into the markdown render.
"""
from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import unquote

from .markdown_plugins.embed_image import EMBED_RE, parse_embed_options
from .models import ImageReference, Media

logger = logging.getLogger(__name__)

__all__ = ["find_images", "rewrite_images", "load_media", "upload_resolver", "is_url"]

MARKDOWN_IMAGE_RE = re.compile(r"!\[(?!\[)(.*?)(?:\|(\d+)(?:x(\d+))?)?\]\((.*?)\)")
DEFAULT_MIME_TYPE = "application/octet-stream"

Resolver = Callable[[str], Optional[str]]


def is_url(src: str) -> bool:
    """True for remote or embedded sources that need no upload."""
    return src.startswith(("http://", "https://", "data:"))


def find_images(text: str) -> List[ImageReference]:
    """Return every image reference in *text*, ordered by position."""
    images: List[ImageReference] = []

    for match in MARKDOWN_IMAGE_RE.finditer(text):
        src = match.group(4)
        images.append(ImageReference(
            original=match.group(0),
            src=src,
            start=match.start(),
            end=match.end(),
            embed=False,
            is_url=is_url(src),
            alt=match.group(1),
            width=match.group(2),
            height=match.group(3),
        ))

    for match in EMBED_RE.finditer(text):
        src = match.group(1)
        options = tuple(match.group(2).split("|")[1:]) if match.group(2) else ()
        parsed = parse_embed_options(options)
        images.append(ImageReference(
            original=match.group(0),
            src=src,
            start=match.start(),
            end=match.end(),
            embed=True,
            is_url=is_url(src),
            width=parsed.get("width"),
            height=parsed.get("height"),
            options=options,
        ))

    images.sort(key=lambda image: image.start)
    return images


def _embed_markup(url: str, image: ImageReference) -> str:
    if image.embed:
        options = list(image.options)
    elif image.width and image.height:
        options = [f"{image.width}x{image.height}"]
    elif image.width:
        options = [image.width]
    else:
        options = []
    return "![[" + "|".join([url] + options) + "]]"


def rewrite_images(text: str, resolve: Resolver) -> str:
    """
    Point every local image reference in *text* at the URL *resolve* returns.

    Args:
        text: Raw note text
        resolve: Called with the URL-decoded source of each local reference;
            returns the public URL, or ``None`` to leave the reference as is.

    Returns:
        The rewritten note text.  Exceptions raised by *resolve* propagate.
    """
    pieces: List[str] = []
    last_index = 0

    for image in find_images(text):
        if image.is_url or image.start < last_index:
            continue

        src = unquote(image.src)
        url = resolve(src)
        if not url:
            logger.warning(f"Could not resolve image '{src}', leaving reference unchanged")
            continue

        pieces.append(text[last_index:image.start])
        pieces.append(_embed_markup(url, image))
        last_index = image.end
        logger.debug("Rewrote image %s -> %s", src, url)

    pieces.append(text[last_index:])
    return "".join(pieces)


def load_media(path: str | Path) -> Media:
    """Read *path* into a :class:`Media` ready for upload."""
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    return Media(
        file_name=path.name,
        mime_type=mime_type or DEFAULT_MIME_TYPE,
        content=path.read_bytes(),
    )


def upload_resolver(base_dir: str | Path, upload: Callable[[Media], Optional[str]]) -> Resolver:
    """
    Build a resolver that uploads files found under *base_dir*.

    Sources are looked up relative to *base_dir* first, then by file name
    anywhere below it.  *upload* receives the loaded :class:`Media` and
    returns the public URL (or ``None`` on failure).
    """
    base = Path(base_dir).expanduser().resolve()

    def _resolve(src: str) -> Optional[str]:
        candidate = base / src
        if not candidate.is_file():
            candidate = next((p for p in base.rglob(Path(src).name) if p.is_file()), None)
        if candidate is None:
            logger.warning(f"Image '{src}' not found under {base}")
            return None
        return upload(load_media(candidate))

    return _resolve
