import unittest
from dataclasses import FrozenInstanceError

from tests._test_path import SRC  # noqa: F401

from promptedit.core.config import EditorSettings


class TestEditorSettings(unittest.TestCase):
    def test_defaults(self):
        s = EditorSettings()
        self.assertIsNone(s.api_key)
        self.assertEqual(s.model, "gemini-2.5-flash-image-preview")
        self.assertAlmostEqual(s.timeout, 60.0)
        self.assertEqual(s.log_level, "INFO")

    def test_frozen(self):
        s = EditorSettings()
        with self.assertRaises(FrozenInstanceError):
            s.model = "other"  # type: ignore[misc]

    def test_from_env_reads_values(self):
        s = EditorSettings.from_env(
            {
                "GEMINI_API_KEY": "secret",
                "GEMINI_IMAGE_MODEL": "my-model",
                "GEMINI_BASE_URL": "http://localhost:9000/v1/",
                "GEMINI_TIMEOUT": "12.5",
                "PROMPTEDIT_LOG_LEVEL": "debug",
            }
        )
        self.assertEqual(s.api_key, "secret")
        self.assertEqual(s.model, "my-model")
        self.assertEqual(s.base_url, "http://localhost:9000/v1")
        self.assertAlmostEqual(s.timeout, 12.5)
        self.assertEqual(s.log_level, "DEBUG")

    def test_from_env_falls_back_on_empty_or_invalid(self):
        s = EditorSettings.from_env({"GEMINI_API_KEY": "", "GEMINI_TIMEOUT": "soon"})
        self.assertIsNone(s.api_key)
        self.assertAlmostEqual(s.timeout, 60.0)

        s = EditorSettings.from_env({"GEMINI_TIMEOUT": "-3"})
        self.assertAlmostEqual(s.timeout, 60.0)
