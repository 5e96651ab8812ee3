"""
Version-string derivation from a repository status.

A strategy is any callable taking a :class:`VersionInfo` and returning the
version string. The default keeps a clean, exactly-tagged checkout at its
tag and marks everything else with the commit distance and ``-SNAPSHOT``.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Callable, Optional

from cuddlefish.exceptions import StrategyError
from cuddlefish.models import RepoStatus


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """Input handed to a status-to-version strategy.

    Attributes
    ----------
    tag: str
        Nearest tag from ``git describe``.
    version: Optional[str]
        Version the project declares for itself, if any.
    ahead: int
        Commits since ``tag``.
    is_ahead: bool
        ``ahead != 0``.
    is_dirty: bool
        Uncommitted changes in the working tree.
    """

    tag: str
    version: Optional[str]
    ahead: int
    is_ahead: bool
    is_dirty: bool

    @classmethod
    def from_status(cls, status: RepoStatus, version: Optional[str] = None) -> "VersionInfo":
        return cls(
            tag=status.tag,
            version=version,
            ahead=status.ahead,
            is_ahead=status.is_ahead,
            is_dirty=status.is_dirty,
        )


StatusToVersion = Callable[[VersionInfo], str]


def default_status_to_version(info: VersionInfo) -> str:
    """``v1.2.0`` on the tag itself, ``v1.2.0.3-SNAPSHOT`` three commits later and dirty."""
    if info.tag and not info.is_ahead and not info.is_dirty:
        return info.tag
    version = info.tag
    if info.is_ahead:
        version += f".{info.ahead}"
    if info.is_dirty:
        version += "-SNAPSHOT"
    return version


def derive_version(
    status: Optional[RepoStatus],
    strategy: StatusToVersion = default_status_to_version,
    version: Optional[str] = None,
) -> Optional[str]:
    """Apply ``strategy`` to ``status``.

    An unknown status (``None``) yields ``version`` unchanged.
    """
    if status is None:
        return version
    return strategy(VersionInfo.from_status(status, version))


def load_strategy(path: str) -> StatusToVersion:
    """Resolve a ``module:function`` import path to a strategy callable.

    Raises
    ------
    StrategyError
        If the path is malformed, can't be imported, or isn't callable.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise StrategyError("Strategy must be given as 'module:function'", context={"path": path})

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise StrategyError(f"Cannot import strategy module: {exc}", context={"path": path}) from exc

    target = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise StrategyError(f"'{module_name}' has no attribute '{attr}'", context={"path": path}) from None

    if not callable(target):
        raise StrategyError(f"'{path}' is not callable", context={"path": path})
    return target
