"""Terminal control helpers for the navigator session.

Owns raw-mode lifecycle and, in fullscreen mode, alternate-screen switching.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int, *, fullscreen: bool = False) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.fullscreen = fullscreen
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Hide cursor; fullscreen sessions also enter the alternate screen.
        prefix = b"\x1b[?1049h" if self.fullscreen else b""
        os.write(self.stdout_fd, prefix + b"\x1b[?25l")

    def disable_tui_mode(self) -> None:
        # Show cursor and restore the main screen buffer.
        suffix = b"\x1b[?1049l" if self.fullscreen else b"\r\n"
        os.write(self.stdout_fd, b"\x1b[?25h" + suffix)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
