"""Git utilities package."""

from .core import git_passthrough, run, try_run
from .repository import GitRepository

__all__ = [
    "run",
    "try_run",
    "git_passthrough",
    "GitRepository",
]
