from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union

from promptedit.app.encoder import encode_image_file, to_data_uri
from promptedit.app.state import (
    Action,
    EditorState,
    GenerateFailed,
    GenerateRejected,
    GenerateStarted,
    GenerateSucceeded,
    ImageSelected,
    PromptChanged,
    Reset,
    UploadFailed,
    reduce,
)
from promptedit.core.errors import MSG_EMPTY_PROMPT, MSG_NO_IMAGE, EditorError, InvalidInputError

logger = logging.getLogger(__name__)

# (encoded_payload, media_type, instruction) -> base64 result payload
EditFn = Callable[[str, str, str], Awaitable[str]]
Listener = Callable[[EditorState], None]


def _error_message(err: BaseException) -> str:
    return str(err) or type(err).__name__


def check_ready(state: EditorState) -> str:
    """Return the trimmed prompt, or raise InvalidInputError if Generate must not run."""
    if state.image is None:
        raise InvalidInputError(MSG_NO_IMAGE)
    prompt = state.prompt.strip()
    if not prompt:
        raise InvalidInputError(MSG_EMPTY_PROMPT)
    return prompt


class EditController:
    """
    Orchestrates upload -> generate for a single session.

    All state changes go through ``dispatch`` so listeners see exactly one
    snapshot per transition. Methods must be called from the event loop that
    runs the coroutines; the controller does no locking of its own.
    """

    def __init__(self, edit_image: EditFn, state: Optional[EditorState] = None):
        self._edit_image = edit_image
        self._state = state or EditorState()
        self._listeners: List[Listener] = []
        self._upload_seq = 0  # latest upload started; older reads are dropped

    @property
    def state(self) -> EditorState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> EditorState:
        new_state = reduce(self._state, action)
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    # ---------- Upload ----------

    async def upload(self, path: Union[str, Path], media_type: Optional[str] = None) -> EditorState:
        self._upload_seq += 1
        ticket = self._upload_seq
        try:
            image = await encode_image_file(path, media_type)
        except EditorError as e:
            action: Action = UploadFailed(e.message)
        else:
            action = ImageSelected(image)

        if ticket != self._upload_seq:
            logger.info("Discarding superseded upload of %s", Path(path).name)
            return self._state
        return self.dispatch(action)

    # ---------- Prompt ----------

    def set_prompt(self, text: str) -> EditorState:
        return self.dispatch(PromptChanged(text))

    # ---------- Generate ----------

    async def generate(self) -> EditorState:
        state = self._state
        if state.loading:
            logger.debug("Generate ignored: a request is already in flight.")
            return state
        try:
            prompt = check_ready(state)
        except InvalidInputError as e:
            return self.dispatch(GenerateRejected(e.message))

        image = state.image
        generation = self.dispatch(GenerateStarted()).generation
        logger.info("Edit request #%d started for %s", generation, image.raw_file.name)

        try:
            payload = await self._edit_image(image.encoded_payload, image.media_type, prompt)
        except Exception as e:
            logger.warning("Edit request #%d failed: %s", generation, e)
            action: Action = GenerateFailed(generation, _error_message(e))
        else:
            action = GenerateSucceeded(generation, to_data_uri(image.media_type, payload))

        if generation != self._state.generation:
            logger.info("Discarding stale result of edit request #%d", generation)
        else:
            logger.info("Edit request #%d finished", generation)
        return self.dispatch(action)

    # ---------- Reset ----------

    def reset(self) -> EditorState:
        self._upload_seq += 1
        return self.dispatch(Reset())
