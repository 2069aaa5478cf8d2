"""Session handles, built from ``session[:window]`` specifiers.

tmux_babel.session
~~~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import logging
import os
import typing as t

from tmux_babel import exc
from tmux_babel.config import TmuxBabelConfig
from tmux_babel.constants import FIRST_WINDOW_MARKER, WINDOW_NAME_MARKER

if t.TYPE_CHECKING:
    from typing_extensions import Self

    from tmux_babel._internal.types import StrPath

logger = logging.getLogger(__name__)


def parse_specifier(specifier: str | None) -> tuple[str | None, str | None]:
    """Split a ``session[:window]`` specifier on its first colon.

    Empty parts come back as ``None``.

    Examples
    --------
    >>> parse_specifier('foo:bar')
    ('foo', 'bar')

    >>> parse_specifier(':bar')
    (None, 'bar')

    >>> parse_specifier('foo')
    ('foo', None)

    >>> parse_specifier('foo:bar:baz')
    ('foo', 'bar:baz')

    >>> parse_specifier('')
    (None, None)
    """
    session, _, window = (specifier or "").partition(":")
    return session or None, window or None


@dataclasses.dataclass(frozen=True)
class SessionHandle:
    """Identify a session/window pair inside tmux.

    A handle lives for a single code block run, tmux remembers the rest.

    Parameters
    ----------
    session_name : str
        Full tmux session name, prefix included.
    window_name : str, optional
        Window to use. ``None`` means the first window of the session.
    socket_path : str, optional
        Control socket of a non-default tmux server.

    Examples
    --------
    >>> handle = SessionHandle.from_specifier('foo:bar')
    >>> handle
    SessionHandle(session_name='org-babel-session-foo', window_name='bar', socket_path=None)

    >>> handle.target
    'org-babel-session-foo:=bar'

    >>> SessionHandle.from_specifier('').target
    'org-babel-session-default:^'
    """

    session_name: str
    window_name: str | None = None
    socket_path: str | None = None

    def __post_init__(self) -> None:
        if not self.session_name:
            raise exc.BadSessionName(reason="empty", session_name=self.session_name)

    @classmethod
    def from_specifier(
        cls,
        specifier: str | None,
        socket_path: StrPath | None = None,
        config: TmuxBabelConfig | None = None,
    ) -> Self:
        """Return handle for a ``session[:window]`` specifier.

        Parameters
        ----------
        specifier : str
            Text of the ``:session`` header argument.
        socket_path : str or path, optional
            Control socket, forwarded to every tmux call.
        config : :class:`~tmux_babel.config.TmuxBabelConfig`, optional
            Supplies the session prefix and default session name.
        """
        if config is None:
            config = TmuxBabelConfig()

        session, window = parse_specifier(specifier)
        session_name = f"{config.session_prefix}{session or config.default_session}"

        return cls(
            session_name=session_name,
            window_name=window,
            socket_path=os.fspath(socket_path) if socket_path is not None else None,
        )

    @property
    def target(self) -> str:
        """Return tmux target for the window.

        Named windows are looked up by exact name, otherwise the first window
        of the session is used.
        """
        if self.window_name is not None:
            return f"{self.session_name}:{WINDOW_NAME_MARKER}{self.window_name}"
        return f"{self.session_name}:{FIRST_WINDOW_MARKER}"

