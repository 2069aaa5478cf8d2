"""Subprocess executor for tmux-babel."""

from __future__ import annotations

import dataclasses
import logging
import os
import shutil
import subprocess
import typing as t

from tmux_babel import exc
from tmux_babel._internal.engines.base import CommandResult, split_output

if t.TYPE_CHECKING:
    from tmux_babel._internal.types import StrPath

logger = logging.getLogger(__name__)


def resolve_argv(args: t.Sequence[str | int]) -> list[str]:
    """Return ``args`` as strings with the program resolved on ``PATH``.

    Raises
    ------
    :exc:`exc.CommandNotFound`
        Program can't be found.
    """
    if not args:
        msg = "No command given"
        raise ValueError(msg)

    argv = [str(a) for a in args]
    program = shutil.which(argv[0])
    if not program:
        raise exc.CommandNotFound(argv[0])
    argv[0] = program
    return argv


@dataclasses.dataclass
class SpawnedProcess:
    """:class:`~tmux_babel._internal.engines.base.Process` backed by Popen."""

    argv: list[str]
    process: subprocess.Popen[bytes]

    def poll(self) -> int | None:
        """Return exit status, or ``None`` while still running."""
        return self.process.poll()

    def wait(self, timeout: float | None = None) -> int:
        """Block until the command exits and return its status."""
        return self.process.wait(timeout=timeout)

    def check(self, timeout: float | None = None) -> None:
        """Wait and raise :exc:`exc.CommandFailed` on a non-zero exit."""
        returncode = self.wait(timeout=timeout)
        if returncode != 0:
            raise exc.CommandFailed(self.argv, returncode)


class SubprocessExecutor:
    """Executor that runs commands via :mod:`subprocess`.

    Parameters
    ----------
    diagnostic_log : str or path, optional
        Output of spawned commands is appended here. Discarded when unset.
    timeout : float, optional
        Seconds :meth:`capture` waits before giving up.

    Examples
    --------
    >>> executor = SubprocessExecutor()
    >>> executor.capture('echo', 'hi').stdout
    ['hi']

    >>> executor.capture('false').returncode
    1
    """

    def __init__(
        self,
        diagnostic_log: StrPath | None = None,
        timeout: float | None = None,
    ) -> None:
        self.diagnostic_log = diagnostic_log
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(diagnostic_log={self.diagnostic_log!r})"

    def execute(self, *args: str) -> SpawnedProcess:
        """Spawn ``args`` without waiting for it."""
        argv = resolve_argv(args)
        logger.debug(f"spawn: {subprocess.list2cmdline(argv)}")

        sink: t.IO[bytes] | None = None
        if self.diagnostic_log is not None:
            sink = open(os.fspath(self.diagnostic_log), "ab")  # noqa: SIM115
        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=sink if sink is not None else subprocess.DEVNULL,
                stderr=subprocess.STDOUT if sink is not None else subprocess.DEVNULL,
                start_new_session=True,
            )
        except PermissionError as e:
            raise exc.CommandNotExecutable(argv[0], e.strerror) from e
        except OSError as e:
            logger.exception(f"Exception for {subprocess.list2cmdline(argv)}")
            raise exc.CommandNotExecutable(argv[0], e.strerror) from e
        finally:
            if sink is not None:
                sink.close()

        return SpawnedProcess(argv=argv, process=process)

    def capture(self, *args: str, check: bool = False) -> CommandResult:
        """Run ``args`` to completion and return its output.

        Raises
        ------
        :exc:`exc.CommandFailed`
            If *check* is set and the command exits non-zero.
        :exc:`exc.WaitTimeout`
            If the command outlives :attr:`timeout`.
        """
        argv = resolve_argv(args)

        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="backslashreplace",
            )
            stdout_str, stderr_str = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
            raise exc.WaitTimeout(
                target=subprocess.list2cmdline(argv),
                seconds=self.timeout,
            ) from None
        except PermissionError as e:
            raise exc.CommandNotExecutable(argv[0], e.strerror) from e
        except OSError as e:
            logger.exception(f"Exception for {subprocess.list2cmdline(argv)}")
            raise exc.CommandNotExecutable(argv[0], e.strerror) from e
        except Exception:
            logger.exception(f"Exception for {subprocess.list2cmdline(argv)}")
            raise

        stdout, stderr = split_output(stdout_str, stderr_str)

        logger.debug(
            "stdout for {cmd}: {stdout}".format(
                cmd=" ".join(argv),
                stdout=stdout,
            ),
        )

        result = CommandResult(
            argv=argv,
            stdout=stdout,
            stderr=stderr,
            returncode=process.returncode,
        )
        if check:
            result.check()
        return result
