"""
git-pr-train - keep a chain of dependent branches and their GitHub PRs in sync
"""

from .__version__ import __version__
from .core import PRTrain
from .cli.main import main

__all__ = ["PRTrain", "main", "__version__"]
