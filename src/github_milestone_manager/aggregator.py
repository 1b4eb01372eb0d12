"""Cross-repository view of milestones, keyed by title.

Aggregation happens in two passes:

1. Fold: each repository's milestones are folded into an accumulator one
   repository at a time. The first occurrence of a title sets its state and due
   date; later occurrences that differ produce warnings.
2. Completeness scan: once every repository is folded, each title is checked
   against the full repository set and every repository lacking it produces a
   warning. This can only happen at the end, when both sets are complete.

Warnings are advisory. They are logged as they are found and returned with the
result, and never stop the aggregation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .due_dates import format_timestamp
from .exceptions import FetchError, RemoteError
from .models import AggregatedMilestone, ConsistencyWarning

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .models import MilestoneRecord, RepositoryRef, WarningKind
    from .protocols import MilestoneProvider

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """Aggregated milestones by title plus the warnings found on the way."""

    milestones: dict[str, AggregatedMilestone] = field(default_factory=dict)
    warnings: list[ConsistencyWarning] = field(default_factory=list)


class MilestoneAggregator:
    """Incremental accumulator of milestones keyed by title."""

    def __init__(self) -> None:
        self.milestones: dict[str, AggregatedMilestone] = {}
        self.warnings: list[ConsistencyWarning] = []

    def _warn(self, kind: WarningKind, title: str, repository: RepositoryRef, message: str) -> None:
        self.warnings.append(ConsistencyWarning(kind, title, repository, message))
        logger.warning(message)

    def add(self, repository: RepositoryRef, records: Iterable[MilestoneRecord]) -> None:
        """Fold one repository's milestones into the view."""
        for record in records:
            existing = self.milestones.get(record.title)
            if existing is None:
                self.milestones[record.title] = AggregatedMilestone(
                    title=record.title,
                    state=record.state,
                    due_on=record.due_on,
                    repositories={repository},
                )
                continue

            others = ", ".join(str(r) for r in existing.sorted_repositories())
            if record.state != existing.state:
                self._warn(
                    "state",
                    record.title,
                    repository,
                    f"milestone {record.title} in repo {repository} has a different state "
                    f"(has {record.state}, expect {existing.state}) than other repos ({others})",
                )
            if record.due_on != existing.due_on:
                self._warn(
                    "due_date",
                    record.title,
                    repository,
                    f"milestone {record.title} in repo {repository} has a different due date "
                    f"(has {format_timestamp(record.due_on)}, expect {format_timestamp(existing.due_on)}) "
                    f"than other repos ({others})",
                )
            existing.repositories.add(repository)

    def finish(self, repositories: Sequence[RepositoryRef]) -> AggregationResult:
        """Warn about repositories missing a title and return the result."""
        for title in sorted(self.milestones):
            milestone = self.milestones[title]
            for repository in repositories:
                if repository not in milestone.repositories:
                    self._warn("missing", title, repository, f"milestone {title} is missing from repo {repository}")
        return AggregationResult(milestones=self.milestones, warnings=self.warnings)


def aggregate_milestones(provider: MilestoneProvider, repositories: Sequence[RepositoryRef]) -> AggregationResult:
    """Fetch and aggregate the milestones of every repository.

    Raises:
        FetchError: If listing the milestones of any repository fails. Nothing
            is returned in that case, as a partial view would read like a
            complete consistency report.
    """
    aggregator = MilestoneAggregator()
    for repository in repositories:
        try:
            records = provider.list_milestones(repository)
        except RemoteError as e:
            msg = f"Failed to list milestones for repo {repository}: {e}"
            raise FetchError(msg) from e
        logger.debug(f"Fetched {len(records)} milestones from {repository}")
        aggregator.add(repository, records)
    return aggregator.finish(repositories)
