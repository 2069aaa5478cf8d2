"""Wrapper for a :term:`tmux(1)` server reached through an optional socket.

tmux_babel.server
~~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import os
import typing as t

from tmux_babel.config import TmuxBabelConfig
from tmux_babel.constants import SESSION_NAME_FORMAT

if t.TYPE_CHECKING:
    from tmux_babel._internal.engines import CommandExecutor, CommandResult, Process
    from tmux_babel._internal.types import StrPath

logger = logging.getLogger(__name__)


class Server:
    """tmux server, addressed by the default socket or ``socket_path``.

    Parameters
    ----------
    socket_path : str or path, optional
        Passed to tmux as ``-S`` on every call.
    config : :class:`~tmux_babel.config.TmuxBabelConfig`, optional
    executor : :class:`~tmux_babel._internal.engines.CommandExecutor`, optional
        Defaults to a :class:`~tmux_babel._internal.engines.SubprocessExecutor`.

    Examples
    --------
    >>> server = Server(socket_path='/tmp/babel.sock')
    >>> server.argv('list-sessions', '-F', '#S')
    ['tmux', '-S/tmp/babel.sock', 'list-sessions', '-F', '#S']

    >>> Server().argv('send-keys', 'Enter', target='s:^')
    ['tmux', 'send-keys', '-t', 's:^', 'Enter']
    """

    def __init__(
        self,
        socket_path: StrPath | None = None,
        config: TmuxBabelConfig | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.socket_path = os.fspath(socket_path) if socket_path is not None else None
        self.config = config if config is not None else TmuxBabelConfig()
        self._executor = executor

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(socket_path={self.socket_path!r})"

    @property
    def executor(self) -> CommandExecutor:
        """Return executor, creating the subprocess one on first use."""
        if self._executor is None:
            from tmux_babel._internal.engines import SubprocessExecutor

            self._executor = SubprocessExecutor(
                diagnostic_log=self.config.diagnostic_log,
            )
        return self._executor

    @property
    def server_args(self) -> list[str]:
        """Return tmux program and global flags."""
        svr_args = [self.config.tmux_bin]
        if self.socket_path:
            svr_args.append(f"-S{self.socket_path}")
        return svr_args

    def argv(
        self,
        cmd: str,
        *args: t.Any,
        target: str | None = None,
    ) -> list[str]:
        """Return full command line for a tmux command."""
        cmd_args = ["-t", str(target), *args] if target is not None else [*args]
        return [*self.server_args, cmd, *(str(a) for a in cmd_args)]

    def cmd(
        self,
        cmd: str,
        *args: t.Any,
        target: str | None = None,
    ) -> Process:
        """Spawn tmux command, don't wait for it.

        Exit status is never checked, tmux reports problems on its own
        diagnostic output.
        """
        return self.executor.execute(*self.argv(cmd, *args, target=target))

    def capture(
        self,
        cmd: str,
        *args: t.Any,
        target: str | None = None,
        check: bool = False,
    ) -> CommandResult:
        """Run tmux command to completion, return its output."""
        return self.executor.capture(
            *self.argv(cmd, *args, target=target),
            check=check,
        )

    def list_session_names(self) -> list[str]:
        """Return names of running sessions.

        An unreachable server (nothing listening on the socket yet) has no
        sessions.
        """
        proc = self.capture("list-sessions", "-F", SESSION_NAME_FORMAT)
        if not proc.ok:
            logger.debug(f"list-sessions failed: {proc.stderr}")
            return []
        return proc.stdout

    def has_session(self, session_name: str) -> bool:
        """Return True if a session named exactly ``session_name`` runs."""
        return session_name in self.list_session_names()

    def attach_argv(self, target: str) -> list[str]:
        """Return command line that attaches a client to ``target``."""
        return self.argv("attach-session", target=target)
