from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_PROMPT = (
    "From the uploaded image, please accurately isolate all human subjects and place them "
    "onto a uniform, neutral background. The output should be a new image featuring only "
    "the clear, high-resolution cutouts of the people."
)


@dataclass(frozen=True)
class RawFile:
    """
    The file the user picked, as read from disk.

    path:
        Where the bytes came from (used for display and logging only).
    data:
        Full file contents.
    """
    path: Path
    data: bytes

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class SelectedImage:
    """
    An uploaded image ready to be sent to the edit service.

    raw_file:
        Source file and its bytes.
    encoded_payload:
        Base64 text of the bytes, without any ``data:`` prefix.
    media_type:
        Declared type, always starting with ``image/``.
    """
    raw_file: RawFile
    encoded_payload: str
    media_type: str

    def data_uri(self) -> str:
        return f"data:{self.media_type};base64,{self.encoded_payload}"
