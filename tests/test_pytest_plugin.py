"""Tests for tmux-babel pytest plugin."""

from __future__ import annotations

import textwrap
import typing as t

if t.TYPE_CHECKING:
    import pytest


def test_plugin(
    pytester: pytest.Pytester,
) -> None:
    """Test tmux-babel pytest plugin fixtures."""
    pytester.makefile(
        ".ini",
        pytest=textwrap.dedent(
            """
[pytest]
addopts=-vv
        """.strip(),
        ),
    )
    pytester.makepyfile(
        test_example=textwrap.dedent(
            """
from tmux_babel.manager import SessionManager


def test_manager_fixture(manager: SessionManager, fake_tmux, recording_executor):
    manager.execute("echo hi", {"session": "work:w"})
    assert fake_tmux.typed["org-babel-session-work:=w"] == ["echo hi"]
    assert recording_executor.commands("new-session")


def test_babel_config(babel_config, user_path):
    assert babel_config.start_path == str(user_path)
    assert babel_config.poll_timeout == 1
        """,
        ),
    )

    result = pytester.runpytest("-p", "no:cacheprovider")
    result.assert_outcomes(passed=2)
