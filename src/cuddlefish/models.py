"""
Repository status record returned by the git reader.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RepoStatus(BaseModel):
    """Parsed ``git describe`` status, optionally augmented with HEAD's log data.

    Built fresh on every query and never mutated. ``message`` and
    ``timestamp`` are only filled in by status aggregation, and only for a
    clean working tree.
    """

    model_config = ConfigDict(frozen=True, validate_by_name=True)

    tag: str = Field(description="Nearest tag reachable from HEAD")
    ahead: int = Field(ge=0, description="Commits between the tag and HEAD")
    is_ahead: bool = Field(alias="ahead?", description="True iff ahead is nonzero")
    ref: str = Field(description="Full commit id of HEAD")
    ref_short: str = Field(alias="ref-short", description="Abbreviated commit id from describe")
    is_dirty: bool = Field(alias="dirty?", description="Working tree has uncommitted changes")
    message: Optional[str] = Field(default=None, description="git log -1 output for HEAD")
    timestamp: Optional[str] = Field(default=None, description="HEAD commit time, epoch seconds")

    @model_validator(mode="after")
    def check_invariants(self) -> "RepoStatus":
        if self.is_ahead != (self.ahead != 0):
            raise ValueError("ahead? must be true exactly when ahead is nonzero")
        if self.is_dirty and (self.message is not None or self.timestamp is not None):
            raise ValueError("a dirty status carries no message or timestamp")
        return self

    def with_commit_info(self, message: str, timestamp: str) -> "RepoStatus":
        """Return a copy carrying the last commit's message and timestamp."""
        return self.model_copy(update={"message": message, "timestamp": timestamp})

    def to_dict(self) -> dict[str, Any]:
        """Render with the describe-style keys (``ahead?``, ``ref-short``, ``dirty?``)."""
        return self.model_dump(by_alias=True, exclude_none=True)
