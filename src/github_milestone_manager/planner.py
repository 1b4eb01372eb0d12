"""Mutation planner bringing a milestone title to a target state across repositories.

For each repository the planner re-reads the live milestones, picks the open
milestone with the requested title and decides whether it needs a change. Every
candidate goes through the DryRunGate, which sends it only on confirmed runs.

Error Handling
--------------
Unlike aggregation, planning is best-effort per repository:
- A failure listing milestones or issues skips that repository (FetchError)
- A failed edit skips that milestone (MutationError)
Both are logged and recorded in the PlanResult; the run continues with the next
repository. Open issues under a milestone being closed are warnings only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import FetchError, MutationError, RemoteError, UnsupportedIntentError
from .gate import DryRunGate
from .models import ConsistencyWarning, PlannedChange

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Callable, Sequence

    from .config import ReconcileConfig
    from .models import MilestoneRecord, RepositoryRef
    from .protocols import MilestoneProvider

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    """Outcome of one planning run."""

    count: int = 0
    changes: list[PlannedChange] = field(default_factory=list)
    warnings: list[ConsistencyWarning] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class MutationPlanner:
    """Plans and, on confirmed runs, applies milestone changes.

    Usage:
        planner = MutationPlanner(provider, ReconcileConfig(confirm=False))
        result = planner.set_due_date(repositories, "0.20", parse_due_date("1/13/2019"))
    """

    def __init__(
        self,
        provider: MilestoneProvider,
        config: ReconcileConfig,
        emit: Callable[[str], None] = print,
    ) -> None:
        self.provider: MilestoneProvider = provider
        self.config: ReconcileConfig = config
        self.emit: Callable[[str], None] = emit
        self.gate: DryRunGate = DryRunGate(provider, config, emit)

    def set_due_date(self, repositories: Sequence[RepositoryRef], title: str, due_on: dt.datetime) -> PlanResult:
        """Move the due date of the open milestone ``title`` in every repository."""
        result = PlanResult()
        for repository in repositories:
            try:
                for milestone in self._open_milestones(repository, title):
                    if milestone.due_on == due_on:
                        logger.debug(f"Milestone {title} in {repository} is already due {due_on}")
                        continue
                    change = PlannedChange(
                        repository=repository,
                        number=milestone.number,
                        title=title,
                        current=milestone.due_on,
                        desired=due_on,
                        patch={"due_on": due_on},
                    )
                    self._apply(change, result)
            except FetchError as e:
                self._record_error(result, e)

        if result.count > 0:
            if self.config.confirm:
                self.emit(f"set {result.count} milestone due dates")
            else:
                self.emit(f"would set {result.count} milestone due dates; re-run with --yes to edit them")
        return result

    def close(self, repositories: Sequence[RepositoryRef], title: str) -> PlanResult:
        """Close the open milestone ``title`` in every repository."""
        result = PlanResult()
        for repository in repositories:
            try:
                for milestone in self._open_milestones(repository, title):
                    self._warn_open_issues(repository, milestone, result)
                    change = PlannedChange(
                        repository=repository,
                        number=milestone.number,
                        title=title,
                        current=milestone.state,
                        desired="closed",
                        patch={"state": "closed"},
                    )
                    self._apply(change, result)
            except FetchError as e:
                self._record_error(result, e)

        if result.count > 0:
            if self.config.confirm:
                self.emit(f"closed {result.count} milestones")
            else:
                self.emit(f"would close {result.count} milestones; re-run with --yes to close them")
        return result

    @staticmethod
    def open(title: str, due_on: dt.datetime) -> PlanResult:
        """Open the milestone ``title`` due ``due_on`` in every repository.

        Not supported: creating a milestone where it is absent has no agreed
        semantics yet. Needs no provider and raises before any remote call, so
        callers need not build a client or resolve repositories first.
        """
        msg = f"Opening milestone {title} (due {due_on:%m/%d/%Y}) is not implemented"
        raise UnsupportedIntentError(msg)

    def _open_milestones(self, repository: RepositoryRef, title: str) -> list[MilestoneRecord]:
        """Return the open milestones titled ``title``; closed ones are skipped."""
        try:
            milestones = self.provider.list_milestones(repository)
        except RemoteError as e:
            msg = f"Failed to list milestones for repo {repository}: {e}"
            raise FetchError(msg) from e
        return [m for m in milestones if m.title == title and m.state == "open"]

    def _warn_open_issues(self, repository: RepositoryRef, milestone: MilestoneRecord, result: PlanResult) -> None:
        try:
            issues = self.provider.list_open_issues(repository, milestone.number)
        except RemoteError as e:
            msg = f"Failed to check for open milestone {milestone.title} issues in repo {repository}: {e}"
            raise FetchError(msg) from e
        for issue in issues:
            message = f"issue #{issue.number} in repo {repository} still active in milestone {milestone.title}"
            result.warnings.append(ConsistencyWarning("open_issue", milestone.title, repository, message))
            logger.warning(message)

    def _apply(self, change: PlannedChange, result: PlanResult) -> None:
        try:
            self.gate.apply(change)
        except MutationError as e:
            self._record_error(result, e)
            return
        result.changes.append(change)
        result.count += 1

    @staticmethod
    def _record_error(result: PlanResult, error: Exception) -> None:
        logger.error(str(error))
        result.errors.append(str(error))
