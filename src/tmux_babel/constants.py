"""Constant variables for tmux-babel."""

from __future__ import annotations

import enum

#: Format string given to ``list-panes -F``; printed once per pane of a live window
WINDOW_ALIVE_SENTINEL = "good"

#: Target prefix that makes tmux look a window up by its exact name
WINDOW_NAME_MARKER = "="

#: Target suffix addressing the first window of a session
FIRST_WINDOW_MARKER = "^"

#: Format string given to ``list-sessions -F``
SESSION_NAME_FORMAT = "#S"

#: Window options switched off so the window can be found by name later
RENAME_OPTIONS: tuple[str, ...] = ("allow-rename", "automatic-rename")

#: Terminal emulator that gets a title and ``-e`` instead of generic options
XTERM = "xterm"


class TargetStatus(enum.Enum):
    """State of a session/window pair as reported by tmux.

    >>> TargetStatus.from_checks(session_alive=True, window_alive=False)
    <TargetStatus.WindowMissing: 'WINDOW_MISSING'>

    >>> TargetStatus.SessionMissing.window_alive
    False
    """

    Alive = "ALIVE"
    WindowMissing = "WINDOW_MISSING"
    SessionMissing = "SESSION_MISSING"
    #: Only reachable when the handle names no window
    SessionMissingWindowAlive = "SESSION_MISSING_WINDOW_ALIVE"

    @classmethod
    def from_checks(cls, session_alive: bool, window_alive: bool) -> TargetStatus:
        """Return member for a pair of existence checks."""
        return _STATUS_FROM_CHECKS[(session_alive, window_alive)]

    @property
    def session_alive(self) -> bool:
        """Return True if the session existed."""
        return self in {TargetStatus.Alive, TargetStatus.WindowMissing}

    @property
    def window_alive(self) -> bool:
        """Return True if the window existed (or no window was asked for)."""
        return self in {TargetStatus.Alive, TargetStatus.SessionMissingWindowAlive}


_STATUS_FROM_CHECKS: dict[tuple[bool, bool], TargetStatus] = {
    (True, True): TargetStatus.Alive,
    (True, False): TargetStatus.WindowMissing,
    (False, False): TargetStatus.SessionMissing,
    (False, True): TargetStatus.SessionMissingWindowAlive,
}
