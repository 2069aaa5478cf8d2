"""Conftest.py (root-level).

We keep this in root pytest fixtures in pytest's doctest plugin to be available, as well
as avoiding conftest.py from being included in the wheel, in addition to pytest_plugin
for pytester only being available via the root directory.

See "pytest_plugins in non-top-level conftest files" in
https://docs.pytest.org/en/stable/deprecations.html
"""

from __future__ import annotations

import os
import typing as t

import pytest
from _pytest.doctest import DoctestItem

from tmux_babel.config import TmuxBabelConfig
from tmux_babel.manager import SessionManager
from tmux_babel.session import SessionHandle
from tmux_babel.test import FakeTmux, RecordingExecutor

if t.TYPE_CHECKING:
    import pathlib

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
) -> None:
    """Configure doctest fixtures for pytest-doctest."""
    if isinstance(request._pyfuncitem, DoctestItem):
        doctest_namespace["TmuxBabelConfig"] = TmuxBabelConfig
        doctest_namespace["SessionManager"] = SessionManager
        doctest_namespace["SessionHandle"] = SessionHandle
        doctest_namespace["FakeTmux"] = FakeTmux
        doctest_namespace["RecordingExecutor"] = RecordingExecutor
        doctest_namespace["request"] = request


@pytest.fixture(autouse=True)
def set_home(
    monkeypatch: pytest.MonkeyPatch,
    user_path: pathlib.Path,
) -> None:
    """Configure home directory for pytest tests."""
    monkeypatch.setenv("HOME", str(user_path))


@pytest.fixture(autouse=True)
def clear_babel_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ``TMUX_BABEL_*`` variables so the developer's settings don't leak in."""
    for k in list(os.environ):
        if k.startswith("TMUX_BABEL_"):
            monkeypatch.delenv(k)
