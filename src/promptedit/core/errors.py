from __future__ import annotations

# User-facing messages shown in the alert region.
MSG_INVALID_FILE = "Please select a valid image file."
MSG_READ_FAILED = "Failed to read the image file."
MSG_NO_IMAGE = "Please upload an image first."
MSG_EMPTY_PROMPT = "Please enter an editing prompt."


class EditorError(Exception):
    """Base class for every error the editor surfaces to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidInputError(EditorError):
    """Wrong file type, missing image or empty prompt. Raised before any I/O."""


class ImageReadError(EditorError):
    """The selected file could not be read from disk."""


class EditServiceError(EditorError):
    """
    The remote edit service failed (network fault, rejection, quota, malformed
    response). The message is shown to the user verbatim.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
