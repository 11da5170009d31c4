from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorSettings:
    """
    Settings for the remote edit service and the app itself.

    api_key:
        Gemini API key (GEMINI_API_KEY). Requests fail with a readable error if unset.
    model:
        Image-capable Gemini model (GEMINI_IMAGE_MODEL).
    base_url:
        API root, without trailing slash (GEMINI_BASE_URL).
    timeout:
        Per-request timeout in seconds (GEMINI_TIMEOUT).
    log_level:
        Root log level name (PROMPTEDIT_LOG_LEVEL).
    """
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash-image-preview"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 60.0
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        load_dotenv_file: bool = True,
    ) -> "EditorSettings":
        if environ is None:
            if load_dotenv_file:
                load_dotenv()
            environ = os.environ

        defaults = cls()
        timeout = defaults.timeout
        raw_timeout = environ.get("GEMINI_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Ignoring invalid GEMINI_TIMEOUT=%r", raw_timeout)
            if timeout <= 0:
                timeout = defaults.timeout

        return cls(
            api_key=environ.get("GEMINI_API_KEY") or None,
            model=environ.get("GEMINI_IMAGE_MODEL") or defaults.model,
            base_url=(environ.get("GEMINI_BASE_URL") or defaults.base_url).rstrip("/"),
            timeout=timeout,
            log_level=(environ.get("PROMPTEDIT_LOG_LEVEL") or defaults.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
