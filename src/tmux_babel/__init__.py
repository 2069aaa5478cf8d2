"""tmux-babel, run code blocks interactively inside a tmux session."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .config import TmuxBabelConfig
from .manager import SessionManager, execute_block
from .server import Server
from .session import SessionHandle

__all__ = (
    "Server",
    "SessionHandle",
    "SessionManager",
    "TmuxBabelConfig",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
    "execute_block",
)
