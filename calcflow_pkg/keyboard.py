"""Keyboard side channel for the basic calculator."""

from __future__ import annotations

from .display import KEY_TOKENS, DisplayBuffer
from .logging_config import get_logger

logger = get_logger("keyboard")

ENTER_KEYS = frozenset({"Enter", "\n", "\r"})
BACKSPACE_KEYS = frozenset({"Backspace", "\b", "\x7f"})


class KeyboardListener:
    """Routes key presses to a ``DisplayBuffer`` while attached.

    Keys are ignored while detached or while a text-input field has focus, so
    typing into other inputs never edits the display.
    """

    def __init__(self, buffer: DisplayBuffer):
        self.buffer = buffer
        self.attached = False
        self.input_focused = False

    def attach(self) -> None:
        self.attached = True
        logger.debug("Keyboard listener attached")

    def detach(self) -> None:
        self.attached = False
        logger.debug("Keyboard listener detached")

    def focus_input(self) -> None:
        self.input_focused = True

    def blur_input(self) -> None:
        self.input_focused = False

    def handle_key(self, key: str) -> bool:
        """Apply ``key`` to the buffer.

        Returns:
            True if the key was consumed
        """
        if not self.attached or self.input_focused:
            return False
        if key in ENTER_KEYS:
            self.buffer.evaluate()
        elif key in BACKSPACE_KEYS:
            self.buffer.backspace()
        elif len(key) == 1 and key in KEY_TOKENS:
            self.buffer.append(key)
        else:
            return False
        return True

    def feed(self, keys: str) -> int:
        """Apply every character of ``keys``; returns how many were consumed."""
        return sum(self.handle_key(key) for key in keys)
