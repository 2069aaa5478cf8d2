"""Terminal emulator launching.

tmux_babel.terminal
~~~~~~~~~~~~~~~~~~~

A terminal emulator is opened once, when a block creates its session, and
attaches a tmux client so the user can watch the block run.
"""

from __future__ import annotations

import logging
import os
import shlex
import typing as t

from tmux_babel.constants import XTERM

if t.TYPE_CHECKING:
    from collections.abc import Sequence

    from tmux_babel._internal.engines import Process
    from tmux_babel.server import Server
    from tmux_babel.session import SessionHandle

logger = logging.getLogger(__name__)


def terminal_command(
    terminal: str,
    attach_argv: Sequence[str],
    target: str,
    terminal_opts: Sequence[str] = ("--",),
) -> list[str]:
    """Return command line that opens ``terminal`` running ``attach_argv``.

    ``xterm`` is titled after the target and runs the client through ``-e``.
    Every other terminal gets ``terminal_opts`` between itself and the client
    command.

    Parameters
    ----------
    terminal : str
        Terminal program, may carry its own arguments, e.g.
        ``"alacritty --class babel"``.
    attach_argv : list of str
        tmux client command.
    target : str
        tmux target, used as xterm's title.
    terminal_opts : list of str
        Separator options for non-xterm terminals.

    Examples
    --------
    >>> terminal_command('xterm', ['tmux', 'attach-session', '-t', 's:^'], 's:^')
    ['xterm', '-T', 's:^', '-e', 'tmux', 'attach-session', '-t', 's:^']

    >>> terminal_command(
    ...     'gnome-terminal', ['tmux', 'attach-session', '-t', 's:^'], 's:^'
    ... )
    ['gnome-terminal', '--', 'tmux', 'attach-session', '-t', 's:^']

    >>> terminal_command('kitty --single-instance', ['tmux', 'a'], 's:^', ())
    ['kitty', '--single-instance', 'tmux', 'a']
    """
    terminal_argv = shlex.split(terminal)
    if not terminal_argv:
        msg = "Terminal command is empty"
        raise ValueError(msg)

    if os.path.basename(terminal_argv[0]) == XTERM:
        return [*terminal_argv, "-T", target, "-e", *attach_argv]
    return [*terminal_argv, *terminal_opts, *attach_argv]


def start_terminal(
    server: Server,
    handle: SessionHandle,
    terminal: str | None = None,
) -> Process:
    """Spawn terminal emulator attached to the handle's target.

    Returns the executor's process handle. The terminal keeps running after
    the block is done.
    """
    if terminal is None:
        terminal = server.config.terminal

    argv = terminal_command(
        terminal,
        server.attach_argv(handle.target),
        handle.target,
        server.config.terminal_opts,
    )
    logger.info(f"Opening {argv[0]} on {handle.target}")
    return server.executor.execute(*argv)
