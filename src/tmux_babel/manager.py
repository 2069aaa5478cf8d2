"""Session lifecycle and code block dispatch.

tmux_babel.manager
~~~~~~~~~~~~~~~~~~

:class:`SessionManager` takes a code block and its header arguments, makes
sure the tmux session and window exist, opens a terminal on new sessions and
types the block into the window line by line. It returns as soon as every line
is sent, output stays in tmux.
"""

from __future__ import annotations

import logging
import re
import subprocess
import typing as t

from tmux_babel import exc
from tmux_babel._internal.retry import retry_until
from tmux_babel.config import TmuxBabelConfig
from tmux_babel.constants import RENAME_OPTIONS, WINDOW_ALIVE_SENTINEL, TargetStatus
from tmux_babel.params import HeaderArgs, expand_body
from tmux_babel.server import Server
from tmux_babel.session import SessionHandle
from tmux_babel.terminal import start_terminal

if t.TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from tmux_babel._internal.engines import CommandExecutor, Process
    from tmux_babel._internal.types import StrPath

logger = logging.getLogger(__name__)

_LINE_BREAKS = re.compile(r"[\n\r]+")


def split_lines(body: str) -> list[str]:
    """Split code block on runs of line breaks.

    Blank lines vanish, leading and trailing line breaks don't produce empty
    lines.

    >>> split_lines('a\\nb\\r\\nc')
    ['a', 'b', 'c']

    >>> split_lines('\\nls\\n\\n\\npwd\\n')
    ['ls', 'pwd']

    >>> split_lines('')
    []
    """
    lines = _LINE_BREAKS.split(body)
    if lines and lines[0] == "":
        lines = lines[1:]
    if lines and lines[-1] == "":
        lines = lines[:-1]
    return lines


def window_alive_from_output(stdout: Iterable[str]) -> bool:
    """Return True if ``list-panes`` printed the sentinel on a line of its own.

    >>> window_alive_from_output(['good'])
    True
    >>> window_alive_from_output(['good', 'good'])
    True
    >>> window_alive_from_output([])
    False
    >>> window_alive_from_output(["can't find window: x"])
    False
    """
    return WINDOW_ALIVE_SENTINEL in stdout


def escape_separator(line: str) -> str:
    r"""Escape a trailing semicolon so tmux doesn't read it as command separator.

    tmux splits its argument list on arguments ending in ``;`` and turns a
    trailing ``\;`` into ``;``.

    >>> escape_separator('SELECT 1;')
    'SELECT 1\\;'
    >>> escape_separator('find . -exec true {} \\;')
    'find . -exec true {} \\\\;'
    >>> escape_separator('a; b')
    'a; b'
    """
    if line.endswith(";"):
        return line[:-1] + "\\;"
    return line


class SessionManager:
    """Create tmux sessions and windows on demand and send code to them.

    Parameters
    ----------
    config : :class:`~tmux_babel.config.TmuxBabelConfig`, optional
    executor : :class:`~tmux_babel._internal.engines.CommandExecutor`, optional
        Runs tmux and the terminal emulator. Defaults to a
        :class:`~tmux_babel._internal.engines.SubprocessExecutor`.

    Examples
    --------
    >>> from tmux_babel.test import FakeTmux, RecordingExecutor
    >>> tmux = FakeTmux()
    >>> manager = SessionManager(executor=RecordingExecutor(responder=tmux))
    >>> manager.execute('echo hi', {'session': 'demo'})
    >>> tmux.typed['org-babel-session-demo:^']
    ['echo hi']
    """

    def __init__(
        self,
        config: TmuxBabelConfig | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config if config is not None else TmuxBabelConfig()
        if executor is None:
            from tmux_babel._internal.engines import SubprocessExecutor

            executor = SubprocessExecutor(diagnostic_log=self.config.diagnostic_log)
        self.executor = executor

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(executor={self.executor!r})"

    def server(self, handle: SessionHandle) -> Server:
        """Return :class:`~tmux_babel.server.Server` reaching the handle's socket."""
        return Server(
            socket_path=handle.socket_path,
            config=self.config,
            executor=self.executor,
        )

    def handle(
        self,
        specifier: str | None,
        socket_path: StrPath | None = None,
    ) -> SessionHandle:
        """Return handle for ``session[:window]`` specifier."""
        return SessionHandle.from_specifier(specifier, socket_path, self.config)

    """
    Existence checks
    """

    def session_alive(self, handle: SessionHandle) -> bool:
        """Return True if the handle's session runs."""
        return self.server(handle).has_session(handle.session_name)

    def window_alive(self, handle: SessionHandle) -> bool:
        """Return True if the handle's window exists.

        A handle without a window name is always alive, the session's first
        window is used.
        """
        if handle.window_name is None:
            return True
        return self.target_ready(handle)

    def target_ready(self, handle: SessionHandle) -> bool:
        """Return True if tmux can address the handle's target.

        Unlike :meth:`window_alive` this always asks tmux, a handle without a
        window name is ready once its session has a first window.
        """
        proc = self.server(handle).capture(
            "list-panes",
            "-F",
            WINDOW_ALIVE_SENTINEL,
            target=handle.target,
        )
        return window_alive_from_output(proc.stdout)

    def status(self, handle: SessionHandle) -> TargetStatus:
        """Return state of the handle's session and window."""
        return TargetStatus.from_checks(
            session_alive=self.session_alive(handle),
            window_alive=self.window_alive(handle),
        )

    """
    Lifecycle
    """

    def create_session(self, handle: SessionHandle) -> bool:
        """Create the handle's session unless it runs already.

        Returns
        -------
        bool
            True if ``new-session`` was issued.
        """
        if self.session_alive(handle):
            return False

        window_name = handle.window_name or self.config.default_window
        logger.info(f"Creating session {handle.session_name}")
        self.server(handle).cmd(
            "new-session",
            "-d",
            "-c",
            self.config.start_path,
            "-s",
            handle.session_name,
            "-n",
            window_name,
        )
        return True

    def create_window(self, handle: SessionHandle) -> bool:
        """Create the handle's window unless it exists already.

        Returns
        -------
        bool
            True if ``new-window`` was issued.
        """
        if self.window_alive(handle):
            return False

        assert handle.window_name is not None
        logger.info(f"Creating window {handle.window_name} in {handle.session_name}")
        self.server(handle).cmd(
            "new-window",
            "-c",
            self.config.start_path,
            "-n",
            handle.window_name,
            "-t",
            handle.session_name,
        )
        return True

    def start_terminal(
        self,
        handle: SessionHandle,
        terminal: str | None = None,
    ) -> Process:
        """Open terminal emulator attached to the handle's window."""
        return start_terminal(self.server(handle), handle, terminal)

    def wait_for_window(
        self,
        handle: SessionHandle,
        timeout: float | None = None,
    ) -> None:
        """Block until tmux can address the handle's window.

        Session and window creation run in the background, text sent before
        they are done would be lost. A handle without a window name waits for
        the session's first window.

        Parameters
        ----------
        timeout : float, optional
            Seconds to wait. Defaults to
            :attr:`~tmux_babel.config.TmuxBabelConfig.poll_timeout`.

        Raises
        ------
        :exc:`exc.WaitTimeout`
            Window didn't show up in time.
        """
        if timeout is None:
            timeout = self.config.poll_timeout

        try:
            retry_until(
                lambda: self.target_ready(handle),
                timeout,
                interval=self.config.poll_interval,
                backoff=self.config.poll_backoff,
                max_interval=self.config.poll_max_interval,
            )
        except exc.WaitTimeout:
            raise exc.WaitTimeout(target=handle.target, seconds=timeout) from None

    def disable_renaming(self, handle: SessionHandle) -> None:
        """Stop tmux and programs in the window from renaming it."""
        server = self.server(handle)
        for option in RENAME_OPTIONS:
            server.cmd("set-option", "-w", option, "off", target=handle.target)

    """
    Dispatch
    """

    def send_lines(self, handle: SessionHandle, lines: Iterable[str]) -> int:
        """Type each line into the handle's window followed by Enter.

        Returns
        -------
        int
            Number of lines sent.
        """
        count = 0
        for line in lines:
            literal = escape_separator(line)
            if literal.startswith("-"):
                self._send_keys(handle, "-l", "--", literal)
            else:
                self._send_keys(handle, "-l", literal)
            self._send_keys(handle, "Enter")
            count += 1
        logger.debug(f"Sent {count} lines to {handle.target}")
        return count

    def _send_keys(self, handle: SessionHandle, *keys: str) -> None:
        # one client per call, wait so tmux gets the keys in order
        timeout = self.config.poll_timeout
        proc = self.server(handle).cmd("send-keys", *keys, target=handle.target)
        try:
            proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            raise exc.WaitTimeout(target=handle.target, seconds=timeout) from None

    def send_body(self, handle: SessionHandle, body: str) -> int:
        """Type code block into the handle's window, one line at a time."""
        return self.send_lines(handle, split_lines(body))

    def send(
        self,
        specifier: str | None,
        body: str,
        *,
        socket_path: StrPath | None = None,
        terminal: str | None = None,
    ) -> SessionHandle:
        """Run ``body`` in the window named by ``specifier``.

        Creates session and window when missing, opens a terminal when the
        session is new, waits for the window and types the body into it.

        Returns
        -------
        :class:`~tmux_babel.session.SessionHandle`
        """
        handle = self.handle(specifier, socket_path)

        # window state is read before anything gets created
        state = self.status(handle)
        logger.debug(f"{handle.target}: {state.name}")

        if not state.session_alive:
            self.create_session(handle)
        if not state.window_alive:
            self.create_window(handle)
        if not state.session_alive:
            self.start_terminal(handle, terminal)

        self.wait_for_window(handle)
        self.disable_renaming(handle)
        self.send_body(handle, body)
        return handle

    def execute(self, body: str, params: Mapping[str, t.Any] | None = None) -> None:
        """Run a code block with the host engine's header arguments.

        Results are never captured, the block's output stays in tmux.

        Parameters
        ----------
        body : str
            Code block.
        params : mapping, optional
            Header arguments, e.g. ``{':session': 'py:repl', ':var': {...}}``.
        """
        args = HeaderArgs.from_params(params, self.config)
        self.send(
            args.session,
            expand_body(body, args.variables),
            socket_path=args.socket,
            terminal=args.terminal,
        )


def execute_block(
    body: str,
    params: Mapping[str, t.Any] | None = None,
    config: TmuxBabelConfig | None = None,
) -> None:
    """Run a code block in tmux with a default :class:`SessionManager`.

    Entry point for host engines that call a plain function.
    """
    if config is None:
        config = TmuxBabelConfig.from_env()
    SessionManager(config=config).execute(body, params)
