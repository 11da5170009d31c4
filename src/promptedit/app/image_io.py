from __future__ import annotations

import io
from pathlib import Path
from typing import Union

from PIL import Image, ImageOps

from promptedit.app.encoder import decode_data_uri

# Extensions Pillow should re-encode to; anything else is written byte-for-byte.
_SAVE_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".webp": "WEBP",
    ".bmp": "BMP",
    ".gif": "GIF",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}


def load_preview(data: bytes) -> Image.Image:
    """Decode image bytes for display, applying EXIF orientation."""
    img = Image.open(io.BytesIO(data))
    img = ImageOps.exif_transpose(img)
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA" if "transparency" in img.info else "RGB")
    return img


def preview_from_data_uri(uri: str) -> Image.Image:
    _media_type, data = decode_data_uri(uri)
    return load_preview(data)


def save_result(uri: str, output_path: Union[str, Path]) -> Path:
    """
    Write the edited image to ``output_path``.

    If the extension asks for the format the returned bytes are actually in, they
    are written unchanged; otherwise Pillow re-encodes (JPEG at quality 95). The
    data URI label is the uploaded type and says nothing about the returned bytes.
    """
    output_path = Path(output_path)
    _media_type, data = decode_data_uri(uri)

    target = _SAVE_FORMATS.get(output_path.suffix.lower())
    if target is None:
        output_path.write_bytes(data)
        return output_path

    img = Image.open(io.BytesIO(data))
    if img.format == target:
        output_path.write_bytes(data)
        return output_path

    if target == "JPEG":
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.save(output_path, format="JPEG", quality=95, optimize=True)
    else:
        img.save(output_path, format=target)
    return output_path
