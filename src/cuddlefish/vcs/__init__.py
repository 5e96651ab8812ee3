"""
VCS module exposing the git status reader.

Re-exports :class:`GitRepo` and the command runner so callers can import them
as ``from cuddlefish.vcs import GitRepo``.
"""

from .command import CommandResult, run_command
from .git import DEFAULT_DESCRIBE_PATTERN, GitRepo, ensure_pattern
