"""tmux-babel pytest plugin."""

from __future__ import annotations

import getpass
import logging
import pathlib
import shutil
import typing as t

import pytest

from tmux_babel.config import TmuxBabelConfig
from tmux_babel.manager import SessionManager
from tmux_babel.test import FakeTmux, RecordingExecutor
from tmux_babel.test.constants import (
    RETRY_INTERVAL_SECONDS,
    RETRY_TIMEOUT_SECONDS,
    TEST_SESSION_PREFIX,
    TEST_SOCKET_PREFIX,
)
from tmux_babel.test.random import namer

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def home_path(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
    """Temporary `/home/` path."""
    return tmp_path_factory.mktemp("home")


@pytest.fixture(scope="session")
def home_user_name() -> str:
    """Return default username to set for :func:`user_path` fixture."""
    return getpass.getuser()


@pytest.fixture(scope="session")
def user_path(home_path: pathlib.Path, home_user_name: str) -> pathlib.Path:
    """Ensure and return temporary user directory.

    New sessions and windows start here when :func:`babel_config` is used.
    """
    p = home_path / home_user_name
    p.mkdir()
    return p


@pytest.fixture(scope="session")
def zshrc(user_path: pathlib.Path) -> pathlib.Path:
    """Suppress ZSH default message.

    Needs a startup file .zshenv, .zprofile, .zshrc, .zlogin.
    """
    p = user_path / ".zshrc"
    p.touch()
    return p


@pytest.fixture
def babel_config(user_path: pathlib.Path) -> TmuxBabelConfig:
    """Return :class:`~tmux_babel.config.TmuxBabelConfig` for tests.

    Polls quickly and gives up after a second, sessions start in
    :func:`user_path`.
    """
    return TmuxBabelConfig(
        start_directory=str(user_path),
        poll_timeout=1,
        poll_interval=0.001,
    )


@pytest.fixture
def fake_tmux() -> FakeTmux:
    """Return empty :class:`~tmux_babel.test.FakeTmux`."""
    return FakeTmux()


@pytest.fixture
def recording_executor(fake_tmux: FakeTmux) -> RecordingExecutor:
    """Return :class:`~tmux_babel.test.RecordingExecutor` answered by ``fake_tmux``."""
    return RecordingExecutor(responder=fake_tmux)


@pytest.fixture
def manager(
    babel_config: TmuxBabelConfig,
    recording_executor: RecordingExecutor,
) -> SessionManager:
    """Return :class:`~tmux_babel.manager.SessionManager` that runs nothing.

    >>> from tmux_babel.manager import SessionManager

    >>> def test_example(manager: SessionManager, fake_tmux) -> None:
    ...     manager.execute('ls', {'session': 'work'})
    ...     assert fake_tmux.typed['org-babel-session-work:^'] == ['ls']
    """
    return SessionManager(config=babel_config, executor=recording_executor)


@pytest.fixture
def tmux_socket(
    request: pytest.FixtureRequest,
    tmp_path_factory: pytest.TempPathFactory,
) -> pathlib.Path:
    """Return socket path of a throwaway tmux server, killed after the test.

    Skips the test if tmux isn't installed.
    """
    tmux_bin = shutil.which("tmux")
    if not tmux_bin:
        pytest.skip("tmux not installed")

    socket_dir = tmp_path_factory.mktemp("sockets")
    socket_path = socket_dir / f"{TEST_SOCKET_PREFIX}{next(namer)}"

    def fin() -> None:
        from tmux_babel._internal.engines import SubprocessExecutor

        SubprocessExecutor(timeout=RETRY_TIMEOUT_SECONDS).capture(
            tmux_bin,
            f"-S{socket_path}",
            "kill-server",
        )

    request.addfinalizer(fin)
    return socket_path


@pytest.fixture
def live_manager(user_path: pathlib.Path, zshrc: pathlib.Path) -> SessionManager:
    """Return :class:`~tmux_babel.manager.SessionManager` driving real tmux.

    The terminal emulator is replaced by ``true`` so no window pops up.
    """
    config = TmuxBabelConfig(
        session_prefix=TEST_SESSION_PREFIX,
        start_directory=str(user_path),
        terminal="true",
        poll_timeout=RETRY_TIMEOUT_SECONDS,
        poll_interval=RETRY_INTERVAL_SECONDS,
    )
    return SessionManager(config=config)


def pytest_configure(config: pytest.Config) -> None:
    """Register markers used by tmux-babel's fixtures."""
    config.addinivalue_line("markers", "live: test talks to a real tmux server")
