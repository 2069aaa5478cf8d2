"""Command executors for tmux-babel."""

from __future__ import annotations

__all__ = (
    "CommandExecutor",
    "CommandResult",
    "Process",
    "SpawnedProcess",
    "SubprocessExecutor",
)

from tmux_babel._internal.engines.base import CommandExecutor, CommandResult, Process
from tmux_babel._internal.engines.subprocess_engine import (
    SpawnedProcess,
    SubprocessExecutor,
)
