"""Metadata for tmux-babel package."""

from __future__ import annotations

__title__ = "tmux-babel"
__package_name__ = "tmux_babel"
__version__ = "0.4.0"
__description__ = "Send literate-programming code blocks to a persistent tmux session"
__email__ = "maintainers@tmux-babel.invalid"
__author__ = "tmux-babel contributors"
__github__ = "https://github.com/tmux-babel/tmux-babel"
__docs__ = "https://tmux-babel.readthedocs.io"
__tracker__ = "https://github.com/tmux-babel/tmux-babel/issues"
__changes__ = "https://github.com/tmux-babel/tmux-babel/blob/master/CHANGES"
__pypi__ = "https://pypi.org/project/tmux-babel/"
__license__ = "MIT"
__copyright__ = "Copyright 2026- tmux-babel contributors"
