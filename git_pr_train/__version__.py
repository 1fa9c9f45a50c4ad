"""Version information for git-pr-train."""

__version__ = "0.1.0"
