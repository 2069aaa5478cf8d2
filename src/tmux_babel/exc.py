"""Provide exceptions used by tmux-babel.

tmux_babel.exc
~~~~~~~~~~~~~~

Notes
-----
Every exception inherits from :exc:`TmuxBabelException`. Errors raised while
talking to external programs derive from :exc:`CommandError`.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Sequence


class TmuxBabelException(Exception):
    """Base exception for all tmux-babel errors."""


class BadSessionName(TmuxBabelException, ValueError):
    """Raised if a resolved tmux session name is empty."""

    def __init__(
        self,
        reason: str,
        session_name: str | None = None,
        *args: object,
    ) -> None:
        msg = f"Bad session name: {reason}"
        if session_name is not None:
            msg += f" (session name: {session_name!r})"
        super().__init__(msg)


class BadHeaderArgument(TmuxBabelException, ValueError):
    """Raised if a header argument passed by the host engine can't be used."""

    def __init__(self, name: str, value: t.Any, *args: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Bad header argument :{name} {value!r}")


class CommandError(TmuxBabelException):
    """Base exception for errors running an external program."""


class CommandNotFound(CommandError):
    """Raised when a program (tmux, the terminal emulator) isn't on ``PATH``."""

    def __init__(self, program: str | None = None, *args: object) -> None:
        self.program = program
        if program is not None:
            super().__init__(f"Command not found: {program}")
        else:
            super().__init__("Command not found")


class CommandNotExecutable(CommandError):
    """Raised when a program exists but the operating system refuses to run it."""

    def __init__(self, program: str, reason: str | None = None, *args: object) -> None:
        self.program = program
        self.reason = reason
        msg = f"Command not executable: {program}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class CommandFailed(CommandError):
    """Raised when a command that was checked exits with a non-zero status."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stderr: Sequence[str] | None = None,
        *args: object,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = list(stderr or [])
        msg = f"Command {' '.join(self.argv)!r} exited with status {returncode}"
        if self.stderr:
            msg += f": {' '.join(self.stderr)}"
        super().__init__(msg)


class WaitTimeout(TmuxBabelException):
    """Raised when a function times out waiting for a condition."""

    def __init__(
        self,
        msg: str | None = None,
        *,
        target: str | None = None,
        seconds: float | None = None,
    ) -> None:
        self.target = target
        self.seconds = seconds
        if msg is None:
            msg = "Timed out"
            if target is not None:
                msg += f" waiting for {target}"
            if seconds is not None:
                msg += f" after {seconds} seconds"
        super().__init__(msg)


class SelfTestFailed(TmuxBabelException):
    """Raised by the self test when the marker read back doesn't match."""

    def __init__(self, expected: str, actual: str, *args: object) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Self test failed: expected {expected!r}, read {actual!r}")
