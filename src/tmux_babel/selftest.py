"""End-to-end check of a tmux-babel setup.

tmux_babel.selftest
~~~~~~~~~~~~~~~~~~~

tmux gives no signal when a typed command has finished. The self test has the
shell write a marker into a temporary file and watches the file instead.
"""

from __future__ import annotations

import logging
import pathlib
import shlex
import tempfile
import typing as t

from tmux_babel import exc
from tmux_babel._internal.retry import retry_until

if t.TYPE_CHECKING:
    from tmux_babel._internal.types import StrPath
    from tmux_babel.manager import SessionManager

logger = logging.getLogger(__name__)

#: Specifier used by the self test
SELF_TEST_SPECIFIER = "test"

#: Text written by the self test
SELF_TEST_MARKER = "hello"


def _file_has_content(path: pathlib.Path) -> bool:
    return path.exists() and path.stat().st_size > 0


def run_self_test(
    manager: SessionManager,
    specifier: str = SELF_TEST_SPECIFIER,
    *,
    marker: str = SELF_TEST_MARKER,
    socket_path: StrPath | None = None,
    terminal: str | None = None,
    timeout: float | None = None,
    raises: bool = False,
) -> bool:
    """Send ``echo <marker> > <file>`` through tmux and read the file back.

    Parameters
    ----------
    manager : :class:`~tmux_babel.manager.SessionManager`
    specifier : str
        ``session[:window]`` to run the check in.
    marker : str
        Text the shell writes.
    socket_path : str or path, optional
    terminal : str, optional
        Terminal emulator opened if the session is new.
    timeout : float, optional
        Seconds to wait for the file. Defaults to the manager's
        :attr:`~tmux_babel.config.TmuxBabelConfig.poll_timeout`.
    raises : bool
        Raise :exc:`~tmux_babel.exc.SelfTestFailed` on a mismatch instead of
        returning ``False``.

    Returns
    -------
    bool
        True if the file holds the marker.

    Raises
    ------
    :exc:`~tmux_babel.exc.WaitTimeout`
        The file stayed empty.
    """
    if timeout is None:
        timeout = manager.config.poll_timeout

    with tempfile.TemporaryDirectory(prefix="tmux-babel-") as tmp:
        path = pathlib.Path(tmp) / "selftest"
        path.touch()

        command = f"echo {shlex.quote(marker)} > {shlex.quote(str(path))}"
        manager.send(specifier, command, socket_path=socket_path, terminal=terminal)

        retry_until(
            lambda: _file_has_content(path),
            timeout,
            interval=manager.config.poll_interval,
            backoff=manager.config.poll_backoff,
            max_interval=manager.config.poll_max_interval,
        )
        contents = path.read_text(encoding="utf-8").strip()

    if contents == marker:
        logger.info("tmux-babel: setup seems to be working")
        return True

    logger.error(
        f"tmux-babel: self test failed, expected {marker!r}, read {contents!r}",
    )
    if raises:
        raise exc.SelfTestFailed(expected=marker, actual=contents)
    return False
