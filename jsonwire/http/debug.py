"""
Debug sink for failure diagnostics.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger("jsonwire.http")


class DebugSink:
    """
    Single debug switch plus a warning sink.

    The pipeline checks ``is_debug_enabled()`` before calling ``warn``, so
    a disabled sink costs one flag check per failure.
    """

    def __init__(self, enabled: bool = False, log: logging.Logger | None = None) -> None:
        self.enabled = enabled
        self._logger = log or logger

    def is_debug_enabled(self) -> bool:
        return self.enabled

    def warn(self, context: Any, message: str) -> None:
        name = context if isinstance(context, str) else type(context).__name__
        self._logger.warning(f"[{name}] {message}")
