"""Internal APIs for tmux-babel, not covered by versioning policy."""
