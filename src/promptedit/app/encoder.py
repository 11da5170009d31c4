from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Tuple, Union

from promptedit.core.errors import (
    MSG_INVALID_FILE,
    MSG_READ_FAILED,
    ImageReadError,
    InvalidInputError,
)
from promptedit.core.models import RawFile, SelectedImage

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Offered by the file dialog but missing from some platforms' mime tables.
for _media_type, _ext in (
    ("image/heic", ".heic"),
    ("image/heif", ".heif"),
    ("image/webp", ".webp"),
    ("image/tiff", ".tif"),
):
    mimetypes.add_type(_media_type, _ext)


def declared_media_type(path: PathLike) -> Optional[str]:
    """Media type implied by the file name, e.g. ``image/png`` for ``photo.png``."""
    media_type, _encoding = mimetypes.guess_type(str(path), strict=False)
    return media_type


def is_image_media_type(media_type: Optional[str]) -> bool:
    return bool(media_type) and media_type.lower().startswith("image/")


def to_data_uri(media_type: str, payload: str) -> str:
    return f"data:{media_type};base64,{payload}"


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Split a ``data:<type>;base64,<payload>`` string into (media_type, raw bytes).

    Raises ValueError for anything that is not a base64 data URI.
    """
    if not uri.startswith("data:"):
        raise ValueError("Not a data URI.")
    header, sep, payload = uri[len("data:"):].partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("Data URI is not base64-encoded.")
    media_type = header[: -len(";base64")] or "application/octet-stream"
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return media_type, data


async def encode_image_file(path: PathLike, media_type: Optional[str] = None) -> SelectedImage:
    """
    Read an image file and encode it for the edit request.

    The declared type (``media_type`` or the one guessed from the file name) must
    start with ``image/``; otherwise InvalidInputError is raised before the file
    is touched. Any read failure becomes ImageReadError with a generic message.
    """
    path = Path(path)
    declared = media_type or declared_media_type(path)
    if not is_image_media_type(declared):
        logger.info("Rejected upload %s (declared type %r)", path.name, declared)
        raise InvalidInputError(MSG_INVALID_FILE)

    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
        raise ImageReadError(MSG_READ_FAILED) from e

    encoded = base64.b64encode(data).decode("ascii")
    logger.info("Encoded %s (%s, %d bytes)", path.name, declared, len(data))
    return SelectedImage(
        raw_file=RawFile(path=path, data=data),
        encoded_payload=encoded,
        media_type=declared.lower(),
    )
