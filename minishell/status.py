"""Turning a finished child's result into the shell's exit status."""

from __future__ import annotations

import signal
from typing import TextIO

_SIGNAL_BASE = 128


def exit_status_from_returncode(returncode: int, report_quit: bool, out: TextIO) -> int:
    """The shell status for a child's return code.

    A negative code means the child died from that signal and gives
    128 plus the signal number; when ``report_quit`` is set a quit signal
    is reported on ``out``.
    """
    if returncode >= 0:
        return returncode
    signum = -returncode
    if report_quit and signum == signal.SIGQUIT:
        out.write(f"Quit {int(signal.SIGQUIT)}\n")
    return _SIGNAL_BASE + signum