"""Git repository status reader.

Shells out to the configured ``git`` executable and parses the output of
``git describe --tags --dirty --long`` into a :class:`RepoStatus`.

Provides:
- Auxiliary queries: current branch, ref resolution, log message, log timestamp
- Describe parsing against a configurable pattern
- Status aggregation (describe + last commit's message and timestamp)

A failing describe or an unparseable describe output is logged as a warning
and reported as ``None`` (unknown status); only an invalid pattern raises.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from cuddlefish.exceptions import InvalidPatternError
from cuddlefish.models import RepoStatus
from cuddlefish.vcs.command import CommandResult, Runner, run_command

if TYPE_CHECKING:
    from cuddlefish.config import Config

logger = logging.getLogger(__name__)

DEFAULT_DESCRIBE_PATTERN = r"(?P<tag>.*)-(?P<ahead>\d+)-g(?P<ref>[0-9a-f]*)(?P<dirty>(-dirty)?)"

# Positional order used when a pattern doesn't name its groups
DESCRIBE_GROUPS = ("tag", "ahead", "ref", "dirty")

PatternLike = Union[str, re.Pattern]


def ensure_pattern(pattern: PatternLike) -> re.Pattern:
    """Compile ``pattern`` if it is a string, pass compiled patterns through.

    The pattern has to name all of ``tag``, ``ahead``, ``ref`` and ``dirty``,
    or else have at least four groups read positionally in that order.

    Raises:
        InvalidPatternError: If ``pattern`` is neither a string nor a compiled
            str pattern, or lacks the describe groups
    """
    if isinstance(pattern, str):
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(
                f"describe pattern does not compile: {e}", context={"pattern": pattern}
            ) from e
    elif isinstance(pattern, re.Pattern) and isinstance(pattern.pattern, str):
        compiled = pattern
    else:
        raise InvalidPatternError(context={"pattern": repr(pattern), "type": type(pattern).__name__})

    named = all(name in compiled.groupindex for name in DESCRIBE_GROUPS)
    if not named and compiled.groups < len(DESCRIBE_GROUPS):
        raise InvalidPatternError(
            "describe pattern needs groups named tag, ahead, ref and dirty, "
            "or at least four positional groups",
            context={"pattern": compiled.pattern, "groups": compiled.groups},
        )
    return compiled


def _describe_groups(match: re.Match) -> dict[str, Optional[str]]:
    names = match.re.groupindex
    if all(name in names for name in DESCRIBE_GROUPS):
        groups = {name: match.group(name) for name in DESCRIBE_GROUPS}
    else:
        groups = dict(zip(DESCRIBE_GROUPS, match.groups()))

    # Only dirty may sit out of a match
    for name in ("tag", "ahead", "ref"):
        if groups[name] is None:
            raise InvalidPatternError(
                f"describe pattern matched without a '{name}' group",
                context={"pattern": match.re.pattern, "input": match.string},
            )
    if not (groups["ahead"].isascii() and groups["ahead"].isdigit()):
        raise InvalidPatternError(
            f"describe pattern captured a non-numeric ahead count: {groups['ahead']!r}",
            context={"pattern": match.re.pattern, "input": match.string},
        )
    return groups


class GitRepo:
    """Read-only view of a git working tree's version metadata.

    Every query spawns exactly one ``git`` process, waits for it, and keeps
    no state between calls.

    Attributes:
        git: Path or name of the git executable
        describe_pattern: Pattern (source or compiled) for describe output
        path: Working directory for git commands, None for the current one
    """

    def __init__(
        self,
        git: str = "git",
        describe_pattern: PatternLike = DEFAULT_DESCRIBE_PATTERN,
        path: Union[str, Path, None] = None,
        runner: Runner = run_command,
        diagnostics: Optional[logging.Logger] = None,
    ):
        """Initialize GitRepo.

        Args:
            git: Git executable (default: "git" on PATH)
            describe_pattern: Pattern with groups tag, ahead, ref, dirty
            path: Repository path (default: process working directory)
            runner: Command runner, replaceable for testing
            diagnostics: Logger that receives warnings (default: module logger)
        """
        self.git = git
        self.describe_pattern = describe_pattern
        self.path = Path(path) if path is not None else None
        self._runner = runner
        self._log = diagnostics or logger

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "GitRepo":
        """Build a reader from a :class:`cuddlefish.config.Config`."""
        return cls(
            git=config.git,
            describe_pattern=config.describe_pattern,
            path=config.repo,
            **kwargs,
        )

    def _run(self, *args: str) -> CommandResult:
        return self._runner([self.git, *args], self.path)

    # ==================== Auxiliary queries ====================

    def current_branch(self) -> str:
        """Abbreviated name of the current branch ("HEAD" when detached)."""
        return self._run("rev-parse", "--abbrev-ref", "HEAD").stdout

    def resolve_ref(self, ref: str) -> str:
        """Resolve a tag or ref name to its commit id."""
        return self._run("rev-parse", "--verify", ref).stdout

    def ref_message(self, ref_or_sha: str) -> str:
        """Full ``git log -1`` entry of ``ref_or_sha``, untrimmed."""
        return self._run("log", "-1", ref_or_sha).out

    def ref_ts(self, ref_or_sha: str) -> str:
        """Commit timestamp of ``ref_or_sha`` in seconds since the epoch."""
        return self._run("log", "-1", "--pretty=%ct", ref_or_sha).stdout

    # ==================== Describe ====================

    def parse_describe(self, out: str) -> Optional[RepoStatus]:
        """Parse ``git describe`` output using the configured pattern.

        The whole of ``out`` has to match. On a match HEAD is resolved to
        fill in the full ref.

        Returns:
            RepoStatus, or None (after a warning) if the output doesn't match

        Raises:
            InvalidPatternError: If the describe pattern is invalid, or a match
                leaves tag, ahead or ref unset or ahead non-numeric
        """
        pattern = ensure_pattern(self.describe_pattern)
        match = pattern.fullmatch(out)
        if match is None:
            self._log.warning(
                f"Couldn't match the current repo status:\n{out!r}\n\n"
                f"Against pattern:\n{pattern.pattern}\n"
            )
            return None

        groups = _describe_groups(match)
        ahead = groups["ahead"]
        dirty = groups["dirty"] or ""
        return RepoStatus(
            tag=groups["tag"],
            ahead=int(ahead),
            is_ahead=ahead != "0",
            ref=self.resolve_ref("HEAD"),
            ref_short=groups["ref"],
            is_dirty=dirty != "",
        )

    def describe(self) -> Optional[RepoStatus]:
        """Status of the working tree according to ``git describe``.

        Returns:
            RepoStatus, or None (after a warning) when git fails or its
            output doesn't match the describe pattern

        Raises:
            InvalidPatternError: If the describe pattern is invalid; raised
                before git is invoked
        """
        ensure_pattern(self.describe_pattern)

        result = self._run("describe", "--tags", "--dirty", "--long")
        if not result.ok:
            self._log.warning(
                f"git describe exited {result.exit_code}\n"
                f"stdout: {result.out!r}\nstderr: {result.err!r}\n"
            )
            return None
        return self.parse_describe(result.stdout)

    def status(self) -> Optional[RepoStatus]:
        """Describe status, plus HEAD's log message and timestamp when clean."""
        status = self.describe()
        if status is None:
            return None
        if status.is_dirty:
            return status
        return status.with_commit_info(
            message=self.ref_message("HEAD"),
            timestamp=self.ref_ts("HEAD"),
        )
