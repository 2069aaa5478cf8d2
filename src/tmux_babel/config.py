"""Configuration for tmux-babel.

tmux_babel.config
~~~~~~~~~~~~~~~~~

Settings live in a :class:`TmuxBabelConfig` that is handed to
:class:`~tmux_babel.manager.SessionManager`, nothing is read from module
globals at run time.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Mapping

    from typing_extensions import Self

logger = logging.getLogger(__name__)

#: Prefix of the environment variables read by :meth:`TmuxBabelConfig.from_env`
ENV_PREFIX = "TMUX_BABEL_"


@dataclasses.dataclass(frozen=True)
class TmuxBabelConfig:
    """Settings shared by every code block run.

    Parameters
    ----------
    tmux_bin : str
        tmux executable, looked up on ``PATH`` when a command runs.
    session_prefix : str
        Prepended to every session name, keeps babel sessions apart from the
        user's own.
    default_session : str
        Session name used when the specifier has no session part.
    default_window : str
        Name of the first window of a new session when the specifier has no
        window part.
    terminal : str
        Terminal emulator opened when a session is created.
    terminal_opts : tuple of str
        Arguments put between the terminal emulator and the tmux command.
    start_directory : str
        Working directory of new sessions and windows, ``~`` is expanded.
    poll_timeout : float, optional
        Seconds to wait for a window to appear. ``None`` waits forever.
    poll_interval : float
        Seconds between two window checks.
    poll_backoff : float
        Factor the interval is multiplied by after each check, ``1`` keeps it
        fixed.
    poll_max_interval : float
        Upper bound for the interval when backing off.
    diagnostic_log : str, optional
        File that receives the output of fire-and-forget commands. Output is
        discarded when unset.

    Examples
    --------
    >>> config = TmuxBabelConfig(poll_timeout=2)
    >>> config.poll_timeout
    2

    >>> config.replace(terminal='xterm').terminal
    'xterm'
    """

    tmux_bin: str = "tmux"
    session_prefix: str = "org-babel-session-"
    default_session: str = "default"
    default_window: str = "ob1"
    terminal: str = "gnome-terminal"
    terminal_opts: tuple[str, ...] = ("--",)
    start_directory: str = "~"
    poll_timeout: float | None = 8
    poll_interval: float = 0.05
    poll_backoff: float = 1.0
    poll_max_interval: float = 1.0
    diagnostic_log: str | None = None

    def __post_init__(self) -> None:
        if self.poll_interval < 0:
            msg = "poll_interval must not be negative"
            raise ValueError(msg)
        if self.poll_backoff < 1:
            msg = "poll_backoff must be 1 or greater"
            raise ValueError(msg)
        if self.poll_timeout is not None and self.poll_timeout < 0:
            msg = "poll_timeout must not be negative"
            raise ValueError(msg)

    @property
    def start_path(self) -> str:
        """Return :attr:`start_directory` with ``~`` expanded."""
        return os.path.expanduser(self.start_directory)

    @property
    def default_header_args(self) -> dict[str, t.Any]:
        """Return header arguments a code block starts out with."""
        return {
            "results": "silent",
            "session": self.default_session,
            "socket": None,
            "terminal": self.terminal,
        }

    def replace(self, **changes: t.Any) -> Self:
        """Return copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: t.Any,
    ) -> Self:
        """Return config built from ``TMUX_BABEL_*`` environment variables.

        Parameters
        ----------
        environ : mapping, optional
            Defaults to :data:`os.environ`.
        **overrides
            Applied on top of the environment.

        Examples
        --------
        >>> TmuxBabelConfig.from_env({'TMUX_BABEL_POLL_TIMEOUT': '3'}).poll_timeout
        3.0

        >>> TmuxBabelConfig.from_env({'TMUX_BABEL_POLL_TIMEOUT': 'none'}).poll_timeout

        >>> TmuxBabelConfig.from_env({}, terminal='xterm').terminal
        'xterm'
        """
        if environ is None:
            environ = os.environ

        kwargs: dict[str, t.Any] = {}
        for field in dataclasses.fields(cls):
            key = f"{ENV_PREFIX}{field.name.upper()}"
            if key not in environ:
                continue
            raw = environ[key]
            try:
                kwargs[field.name] = _coerce(field.name, raw)
            except ValueError:
                logger.exception(f"Invalid value {key}={raw!r}")
                raise
        kwargs.update(overrides)
        return cls(**kwargs)


_FLOAT_FIELDS = {"poll_interval", "poll_backoff", "poll_max_interval"}
_OPTIONAL_FLOAT_FIELDS = {"poll_timeout"}
_OPTIONAL_STR_FIELDS = {"diagnostic_log"}


def _coerce(name: str, raw: str) -> t.Any:
    """Convert environment variable text into a field value."""
    if name in _FLOAT_FIELDS:
        return float(raw)
    if name in _OPTIONAL_FLOAT_FIELDS:
        if raw.strip().lower() in {"", "none", "never"}:
            return None
        return float(raw)
    if name in _OPTIONAL_STR_FIELDS:
        return raw or None
    if name == "terminal_opts":
        return tuple(raw.split())
    return raw
