"""Base executor types for tmux-babel."""

from __future__ import annotations

import dataclasses
import typing as t

from tmux_babel import exc

if t.TYPE_CHECKING:
    from typing_extensions import Self


@dataclasses.dataclass
class CommandResult:
    """Output of a command run to completion.

    Attributes
    ----------
    argv : list[str]
        The command that was executed (for debugging)
    stdout : list[str]
        Standard output split by lines, trailing blank lines removed
    stderr : list[str]
        Non-empty lines of standard error
    returncode : int
        Exit status

    Examples
    --------
    >>> result = CommandResult(argv=['tmux', 'ls'], stdout=['a'], returncode=0)
    >>> result.ok
    True
    >>> result.check() is result
    True

    >>> CommandResult(argv=['tmux', 'ls'], returncode=1).check()
    Traceback (most recent call last):
    ...
    tmux_babel.exc.CommandFailed: Command 'tmux ls' exited with status 1
    """

    argv: list[str]
    stdout: list[str] = dataclasses.field(default_factory=list)
    stderr: list[str] = dataclasses.field(default_factory=list)
    returncode: int = 0

    @property
    def ok(self) -> bool:
        """Return True if the command exited successfully."""
        return self.returncode == 0

    def check(self) -> Self:
        """Raise :exc:`~tmux_babel.exc.CommandFailed` on a non-zero exit."""
        if not self.ok:
            raise exc.CommandFailed(self.argv, self.returncode, self.stderr)
        return self


class Process(t.Protocol):
    """Handle on a fire-and-forget command.

    Callers never have to touch it. It is returned so the rare caller that
    does care can wait for, or check, the outcome.
    """

    @property
    def argv(self) -> list[str]:
        """The command that was spawned."""
        ...

    def poll(self) -> int | None:
        """Return exit status, or ``None`` while still running."""
        ...

    def wait(self, timeout: float | None = None) -> int:
        """Block until the command exits and return its status."""
        ...


class CommandExecutor(t.Protocol):
    """Capability to run external programs.

    :meth:`execute` spawns without waiting and is used for everything that
    changes state. :meth:`capture` blocks and returns the output and is used
    only to ask tmux questions.
    """

    def execute(self, *args: str) -> Process:
        """Spawn ``args`` and return immediately."""
        ...

    def capture(self, *args: str, check: bool = False) -> CommandResult:
        """Run ``args`` to completion and return its output."""
        ...


def split_output(stdout: str, stderr: str) -> tuple[list[str], list[str]]:
    """Split raw process output the way results are stored.

    >>> split_output('good\\ngood\\n\\n', 'oops\\n\\n')
    (['good', 'good'], ['oops'])

    >>> split_output('', '')
    ([], [])
    """
    stdout_split = stdout.split("\n")
    # remove trailing newlines from stdout
    while stdout_split and stdout_split[-1] == "":
        stdout_split.pop()

    stderr_split = stderr.split("\n")
    return stdout_split, list(filter(None, stderr_split))  # filter empty values
