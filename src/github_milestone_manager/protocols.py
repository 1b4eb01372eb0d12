"""Protocol defining the contract for milestone providers.

The reconciliation components never talk to a remote API directly. They are
given a MilestoneProvider, which lists repositories, milestones and issues and
edits milestones. This separation allows:
- Testing the resolver, aggregator and planner with in-memory providers
- Keeping PyGithub specifics (pagination headers, exception types) in one place
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .models import IssueRef, MilestoneRecord, RepositoryRef


class MilestoneProvider(Protocol):
    """Protocol for reading and editing milestones on a remote platform.

    Every method raises RemoteError when the underlying call fails. Providers do
    not retry; a failure is surfaced immediately.

    Example implementations:
        - GithubMilestoneProvider: Uses PyGithub against the GitHub REST API
    """

    def list_repositories(self, org: str, page: int | None) -> tuple[list[RepositoryRef], int | None]:
        """Return one page of an organization's repositories.

        Args:
            org: Organization name
            page: Page to fetch, None for the first page

        Returns:
            The repositories on this page and the next page to fetch, or None if
            this is the last page.
        """
        ...

    def list_milestones(self, repository: RepositoryRef) -> list[MilestoneRecord]:
        """Return all milestones of a repository, open and closed."""
        ...

    def edit_milestone(self, repository: RepositoryRef, number: int, patch: dict[str, Any]) -> MilestoneRecord:
        """Apply a partial update to one milestone and return the updated record.

        Args:
            repository: Repository holding the milestone
            number: Repository-scoped milestone number
            patch: Fields to change, e.g. {"state": "closed"} or {"due_on": datetime}
        """
        ...

    def list_open_issues(self, repository: RepositoryRef, milestone_number: int) -> list[IssueRef]:
        """Return the issues still open under a milestone."""
        ...
