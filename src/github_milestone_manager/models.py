"""Data models shared by the resolver, aggregator and mutation planner.

These models represent the normalized data exchanged between a
MilestoneProvider and the reconciliation components. They are intentionally
simple and provider-agnostic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .exceptions import ArgumentError

MilestoneState = Literal["open", "closed"]
WarningKind = Literal["state", "due_date", "missing", "open_issue"]


@dataclass(frozen=True, order=True)
class RepositoryRef:
    """A repository identified by owner and name."""

    owner: str
    name: str

    @classmethod
    def parse(cls, repo_path: str) -> RepositoryRef:
        """Parse an ``owner/name`` path.

        Only the format is checked; whether the repository exists is discovered
        on the first remote call.
        """
        path = repo_path.strip()
        parts = path.split("/")
        if len(parts) != 2:
            msg = f"Invalid repository path: '{repo_path}'. Expected format: 'owner/repository'"
            raise ArgumentError(msg)
        owner, name = parts
        if not owner or not name:
            msg = f"Invalid repository path: '{repo_path}'. Both owner and repository name must be non-empty"
            raise ArgumentError(msg)
        return cls(owner, name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class MilestoneRecord:
    """A milestone as stored in one repository.

    The number is repository scoped and is what edit calls need; the title is
    the identity used to match milestones across repositories.
    """

    number: int
    title: str
    state: MilestoneState = "open"
    due_on: datetime | None = None


@dataclass(frozen=True)
class IssueRef:
    """An issue attached to a milestone."""

    number: int
    title: str = ""


@dataclass
class AggregatedMilestone:
    """A milestone title seen across the repositories of a target.

    The state and due date are the first observed values. They only serve as the
    baseline for divergence warnings and are never overwritten.
    """

    title: str
    state: MilestoneState
    due_on: datetime | None
    repositories: set[RepositoryRef] = field(default_factory=set)

    def sorted_repositories(self) -> list[RepositoryRef]:
        return sorted(self.repositories, key=str)


@dataclass(frozen=True)
class ConsistencyWarning:
    """An advisory finding. Never an error, never halts processing."""

    kind: WarningKind
    title: str
    repository: RepositoryRef
    message: str = field(compare=False)


@dataclass(frozen=True)
class PlannedChange:
    """One milestone in one repository that needs a single update call."""

    repository: RepositoryRef
    number: int
    title: str
    current: Any
    desired: Any
    patch: dict[str, Any]
