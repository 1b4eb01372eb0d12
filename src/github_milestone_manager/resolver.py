"""
Resolution of a target (``owner/repo`` or organization) into repositories.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import ArgumentError, RemoteError, RepositoryLookupError
from .models import RepositoryRef

if TYPE_CHECKING:
    from .protocols import MilestoneProvider

logger: logging.Logger = logging.getLogger(__name__)


def resolve_repositories(provider: MilestoneProvider, target: str) -> list[RepositoryRef]:
    """Return the ordered repositories a target refers to.

    A target containing a ``/`` is a single repository and is returned without
    any remote call. Anything else is an organization, whose repositories are
    listed page by page until the provider reports no next page.

    Raises:
        ArgumentError: If the target is empty or not a valid repository path
        RepositoryLookupError: If any page of the organization listing fails.
            Pages fetched before the failure are discarded.
    """
    target = target.strip()
    if not target:
        msg = "Missing repository or organization name"
        raise ArgumentError(msg)

    if "/" in target:
        return [RepositoryRef.parse(target)]

    repositories: list[RepositoryRef] = []
    page: int | None = None
    while True:
        try:
            repos, next_page = provider.list_repositories(target, page)
        except RemoteError as e:
            msg = f"Failed to list repositories of organization {target}: {e}"
            raise RepositoryLookupError(msg) from e
        repositories.extend(repos)
        if next_page is None:
            break
        page = next_page

    logger.info(f"Resolved {len(repositories)} repositories in organization {target}")
    return repositories
