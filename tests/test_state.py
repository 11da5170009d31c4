import unittest
from dataclasses import FrozenInstanceError
from pathlib import Path

from tests._test_path import SRC  # noqa: F401

from promptedit.app.state import (
    EditorState,
    GenerateFailed,
    GenerateRejected,
    GenerateStarted,
    GenerateSucceeded,
    ImageSelected,
    PromptChanged,
    Reset,
    UploadFailed,
    WorkflowStatus,
    reduce,
)
from promptedit.core.models import DEFAULT_PROMPT, RawFile, SelectedImage


def _image(name: str = "photo.png") -> SelectedImage:
    return SelectedImage(
        raw_file=RawFile(path=Path(name), data=b"img"),
        encoded_payload="aW1n",
        media_type="image/png",
    )


class TestEditorState(unittest.TestCase):
    def test_initial_state(self):
        s = EditorState()
        self.assertIsNone(s.image)
        self.assertIsNone(s.result)
        self.assertIsNone(s.error)
        self.assertFalse(s.loading)
        self.assertEqual(s.prompt, DEFAULT_PROMPT)
        self.assertIs(s.status, WorkflowStatus.IDLE)
        self.assertFalse(s.can_generate)

    def test_frozen(self):
        s = EditorState()
        with self.assertRaises(FrozenInstanceError):
            s.loading = True  # type: ignore[misc]

    def test_can_generate_needs_image_and_idle(self):
        s = reduce(EditorState(), ImageSelected(_image()))
        self.assertTrue(s.can_generate)
        s = reduce(s, GenerateStarted())
        self.assertFalse(s.can_generate)


class TestReduce(unittest.TestCase):
    def test_image_selected_clears_result_and_error(self):
        s = EditorState(result="data:image/png;base64,old", error="boom", generation=3)
        img = _image()
        s2 = reduce(s, ImageSelected(img))
        self.assertIs(s2.image, img)
        self.assertIsNone(s2.result)
        self.assertIsNone(s2.error)
        self.assertEqual(s2.generation, 4)

    def test_upload_failed_sets_error_only(self):
        img = _image()
        s = reduce(EditorState(), ImageSelected(img))
        s2 = reduce(s, UploadFailed("Please select a valid image file."))
        self.assertIs(s2.image, img)
        self.assertEqual(s2.error, "Please select a valid image file.")
        self.assertEqual(s2.generation, s.generation)
        self.assertIs(s2.status, WorkflowStatus.ERROR)

    def test_upload_failed_while_loading_ends_loading(self):
        s = reduce(EditorState(image=_image()), GenerateStarted())
        in_flight = s.generation

        s2 = reduce(s, UploadFailed("Please select a valid image file."))

        self.assertFalse(s2.loading)
        self.assertEqual(s2.error, "Please select a valid image file.")
        self.assertIs(s2.status, WorkflowStatus.ERROR)
        self.assertFalse(s2.loading and s2.error is not None)
        self.assertEqual(s2.generation, in_flight + 1)
        self.assertIs(reduce(s2, GenerateSucceeded(in_flight, "data:image/png;base64,late")), s2)

    def test_error_hides_previous_result(self):
        s = EditorState(image=_image(), result="data:image/png;base64,abcd")
        self.assertIsNone(reduce(s, GenerateRejected("Please enter an editing prompt.")).result)
        self.assertIsNone(reduce(s, UploadFailed("Failed to read the image file.")).result)

    def test_prompt_changed(self):
        s = reduce(EditorState(), PromptChanged("make it blue"))
        self.assertEqual(s.prompt, "make it blue")

    def test_generate_rejected_does_not_enter_loading(self):
        s = reduce(EditorState(), GenerateRejected("Please upload an image first."))
        self.assertFalse(s.loading)
        self.assertEqual(s.error, "Please upload an image first.")

    def test_generate_started_clears_result_and_error(self):
        s = EditorState(image=_image(), result="data:x;base64,AA==", error="old", generation=1)
        s2 = reduce(s, GenerateStarted())
        self.assertTrue(s2.loading)
        self.assertIsNone(s2.result)
        self.assertIsNone(s2.error)
        self.assertEqual(s2.generation, 2)
        self.assertIs(s2.status, WorkflowStatus.LOADING)

    def test_generate_succeeded_sets_result(self):
        s = reduce(EditorState(image=_image()), GenerateStarted())
        s2 = reduce(s, GenerateSucceeded(s.generation, "data:image/png;base64,abcd"))
        self.assertFalse(s2.loading)
        self.assertEqual(s2.result, "data:image/png;base64,abcd")
        self.assertIs(s2.status, WorkflowStatus.IDLE)

    def test_generate_failed_sets_error(self):
        s = reduce(EditorState(image=_image()), GenerateStarted())
        s2 = reduce(s, GenerateFailed(s.generation, "quota exceeded"))
        self.assertFalse(s2.loading)
        self.assertIsNone(s2.result)
        self.assertEqual(s2.error, "quota exceeded")

    def test_stale_outcomes_are_ignored(self):
        s = reduce(EditorState(image=_image()), GenerateStarted())
        stale = s.generation
        s = reduce(s, ImageSelected(_image("newer.png")))

        self.assertIs(reduce(s, GenerateSucceeded(stale, "data:image/png;base64,zz")), s)
        self.assertIs(reduce(s, GenerateFailed(stale, "late failure")), s)

    def test_reset_restores_defaults_and_bumps_generation(self):
        s = EditorState(image=_image(), prompt="", result="data:x;base64,AA==", error="e", generation=5)
        s2 = reduce(s, Reset())
        self.assertIsNone(s2.image)
        self.assertIsNone(s2.result)
        self.assertIsNone(s2.error)
        self.assertEqual(s2.prompt, DEFAULT_PROMPT)
        self.assertEqual(s2.generation, 6)

    def test_unknown_action(self):
        with self.assertRaises(TypeError):
            reduce(EditorState(), object())  # type: ignore[arg-type]
