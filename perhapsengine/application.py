"""Window and input start-up for an application."""

from __future__ import annotations

import logging

from .context import Context, ContextError
from .input import Input

logger = logging.getLogger(__name__)


class Application:
    """Creates the window and subscribes input to it."""

    def __init__(self, context: Context, input_system: Input) -> None:
        self.context = context
        self.input = input_system
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, scr_width: float, scr_height: float, title: str) -> None:
        """Open the window and hook up input; raises ContextError on failure."""
        try:
            self.context.create_context(int(scr_width), int(scr_height), title)
        except ContextError:
            self._initialized = False
            logger.error("Failed to create a context.")
            raise
        self._initialized = True
        self.input.initialize()