import unittest
from dataclasses import FrozenInstanceError, replace
from pathlib import Path

from tests._test_path import SRC  # noqa: F401  (ensures src on path)

from promptedit.core.models import DEFAULT_PROMPT, RawFile, SelectedImage


def _image(media_type: str = "image/png") -> SelectedImage:
    return SelectedImage(
        raw_file=RawFile(path=Path("/tmp/photo.png"), data=b"\x89PNG"),
        encoded_payload="iVBORw==",
        media_type=media_type,
    )


class TestSelectedImage(unittest.TestCase):
    def test_frozen(self):
        img = _image()
        with self.assertRaises(FrozenInstanceError):
            img.encoded_payload = "other"  # type: ignore[misc]

    def test_replace_leaves_original_unchanged(self):
        img = _image()
        img2 = replace(img, media_type="image/jpeg")
        self.assertEqual(img2.media_type, "image/jpeg")
        self.assertEqual(img.media_type, "image/png")

    def test_data_uri(self):
        self.assertEqual(_image().data_uri(), "data:image/png;base64,iVBORw==")

    def test_raw_file_name_and_size(self):
        raw = _image().raw_file
        self.assertEqual(raw.name, "photo.png")
        self.assertEqual(raw.size_bytes, 4)


class TestDefaultPrompt(unittest.TestCase):
    def test_default_prompt_is_not_blank(self):
        self.assertTrue(DEFAULT_PROMPT.strip())
        self.assertTrue(DEFAULT_PROMPT.startswith("From the uploaded image"))
