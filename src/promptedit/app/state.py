from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Optional, Union

from promptedit.core.models import DEFAULT_PROMPT, SelectedImage


class WorkflowStatus(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class EditorState:
    """
    Immutable snapshot of one editing session.

    Every user action produces a new snapshot through ``reduce``; the UI only ever
    renders snapshots. ``generation`` increases on each upload, each accepted
    Generate and each reset, so results of requests started earlier can be told
    apart from the current one.
    """
    # Input
    image: Optional[SelectedImage] = None
    prompt: str = DEFAULT_PROMPT

    # Output
    result: Optional[str] = None  # data URI of the edited image

    # Workflow
    loading: bool = False
    error: Optional[str] = None
    generation: int = 0

    @property
    def status(self) -> WorkflowStatus:
        if self.loading:
            return WorkflowStatus.LOADING
        if self.error is not None:
            return WorkflowStatus.ERROR
        return WorkflowStatus.IDLE

    @property
    def can_generate(self) -> bool:
        return self.image is not None and not self.loading


# ---------- Actions ----------

@dataclass(frozen=True)
class ImageSelected:
    image: SelectedImage


@dataclass(frozen=True)
class UploadFailed:
    message: str


@dataclass(frozen=True)
class PromptChanged:
    text: str


@dataclass(frozen=True)
class GenerateRejected:
    message: str


@dataclass(frozen=True)
class GenerateStarted:
    pass


@dataclass(frozen=True)
class GenerateSucceeded:
    generation: int
    result: str


@dataclass(frozen=True)
class GenerateFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class Reset:
    pass


Action = Union[
    ImageSelected,
    UploadFailed,
    PromptChanged,
    GenerateRejected,
    GenerateStarted,
    GenerateSucceeded,
    GenerateFailed,
    Reset,
]


def reduce(state: EditorState, action: Action) -> EditorState:
    """Return the state that follows ``state`` after ``action``."""
    if isinstance(action, ImageSelected):
        # A new upload discards any result and drops in-flight requests.
        return replace(
            state,
            image=action.image,
            result=None,
            loading=False,
            error=None,
            generation=state.generation + 1,
        )

    if isinstance(action, UploadFailed):
        # Leaves loading like any other error; the in-flight request is dropped.
        return replace(
            state,
            result=None,
            loading=False,
            error=action.message,
            generation=state.generation + 1 if state.loading else state.generation,
        )

    if isinstance(action, GenerateRejected):
        # Entering the error state hides any previous result.
        return replace(state, result=None, error=action.message)

    if isinstance(action, PromptChanged):
        return replace(state, prompt=action.text)

    if isinstance(action, GenerateStarted):
        return replace(
            state,
            result=None,
            loading=True,
            error=None,
            generation=state.generation + 1,
        )

    if isinstance(action, GenerateSucceeded):
        if action.generation != state.generation:
            return state
        return replace(state, result=action.result, loading=False, error=None)

    if isinstance(action, GenerateFailed):
        if action.generation != state.generation:
            return state
        return replace(state, result=None, loading=False, error=action.message)

    if isinstance(action, Reset):
        return EditorState(generation=state.generation + 1)

    raise TypeError(f"Unknown action: {action!r}")
