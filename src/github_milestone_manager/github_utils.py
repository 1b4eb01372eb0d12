from __future__ import annotations

import datetime as dt
import logging
import os
from typing import TYPE_CHECKING, Any, Final
from urllib.parse import parse_qs, urlparse

import requests
from github import Auth, Github, GithubException

from . import utils
from .exceptions import RemoteError
from .models import IssueRef, MilestoneRecord, RepositoryRef

if TYPE_CHECKING:
    from github.Repository import Repository

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VAR: Final[str] = "GITHUB_TOKEN"  # noqa: S105
_DEFAULT_TOKEN_PASS_PATH: Final[str] = "github/cli/token"  # noqa: S105
_DEFAULT_PER_PAGE: Final[int] = 100


def get_token(pass_path: str | None = None) -> str | None:
    """Get GitHub token from pass path, env var GITHUB_TOKEN, or default pass location."""
    # Try pass path first
    if pass_path:
        return utils.get_pass_value(pass_path)

    # Try environment variable
    token: str | None = os.environ.get(_TOKEN_ENV_VAR)
    if token:
        return token

    # Try default pass path
    try:
        return utils.get_pass_value(_DEFAULT_TOKEN_PASS_PATH)
    except (utils.PassError, OSError):
        logger.warning("No GitHub token specified nor found, only public repositories are accessible")
        return None


def get_client(token: str | None = None) -> Github:
    """Get a GitHub client using the token. Requests are never retried."""
    if token:
        return Github(auth=Auth.Token(token), retry=None)
    return Github(retry=None)


def _next_page(link_header: str | None) -> int | None:
    """Extract the next page number from a ``Link`` response header."""
    if not link_header:
        return None
    for link in requests.utils.parse_header_links(link_header):
        if link.get("rel") == "next":
            pages = parse_qs(urlparse(link["url"]).query).get("page")
            if pages:
                return int(pages[0])
    return None


def _parse_timestamp(value: str | None) -> dt.datetime | None:
    if not value:
        return None
    return dt.datetime.fromisoformat(value)


def _encode_patch(patch: dict[str, Any]) -> dict[str, Any]:
    """Convert datetimes in a milestone patch into GitHub's timestamp format."""
    encoded: dict[str, Any] = {}
    for key, value in patch.items():
        if isinstance(value, dt.datetime):
            encoded[key] = value.astimezone(dt.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        else:
            encoded[key] = value
    return encoded


class GithubMilestoneProvider:
    """MilestoneProvider backed by the GitHub REST API through PyGithub."""

    def __init__(self, client: Github, *, per_page: int = _DEFAULT_PER_PAGE) -> None:
        self.client: Github = client
        self.per_page: int = per_page

    def _repo(self, repository: RepositoryRef) -> Repository:
        return self.client.get_repo(repository.full_name, lazy=True)

    def list_repositories(self, org: str, page: int | None) -> tuple[list[RepositoryRef], int | None]:
        parameters: dict[str, Any] = {"per_page": self.per_page}
        if page is not None:
            parameters["page"] = page
        try:
            headers, data = self.client.requester.requestJsonAndCheck(
                "GET", f"/orgs/{org}/repos", parameters=parameters
            )
        except (GithubException, requests.RequestException) as e:
            msg = f"Failed to list repositories of organization {org}: {e}"
            raise RemoteError(msg) from e

        repos = [RepositoryRef.parse(item["full_name"]) for item in data or []]
        next_page = _next_page(headers.get("link"))
        logger.debug(f"Listed {len(repos)} repositories of {org} (page {page or 1}, next {next_page})")
        return repos, next_page

    def list_milestones(self, repository: RepositoryRef) -> list[MilestoneRecord]:
        try:
            return [
                MilestoneRecord(
                    number=milestone.number,
                    title=milestone.title,
                    state="closed" if milestone.state == "closed" else "open",
                    due_on=milestone.due_on,
                )
                for milestone in self._repo(repository).get_milestones(state="all")
            ]
        except (GithubException, requests.RequestException) as e:
            msg = f"Failed to list milestones of {repository}: {e}"
            raise RemoteError(msg) from e

    def edit_milestone(self, repository: RepositoryRef, number: int, patch: dict[str, Any]) -> MilestoneRecord:
        try:
            _, data = self.client.requester.requestJsonAndCheck(
                "PATCH",
                f"/repos/{repository.full_name}/milestones/{number}",
                input=_encode_patch(patch),
            )
        except (GithubException, requests.RequestException) as e:
            msg = f"Failed to edit milestone #{number} of {repository}: {e}"
            raise RemoteError(msg) from e

        return MilestoneRecord(
            number=data["number"],
            title=data["title"],
            state=data["state"],
            due_on=_parse_timestamp(data.get("due_on")),
        )

    def list_open_issues(self, repository: RepositoryRef, milestone_number: int) -> list[IssueRef]:
        """Return the open issues of a milestone.

        PyGithub only filters issues by a Milestone object, so this costs one
        extra request to fetch the milestone before listing its issues.
        """
        try:
            repo = self._repo(repository)
            milestone = repo.get_milestone(milestone_number)
            return [IssueRef(issue.number, issue.title) for issue in repo.get_issues(milestone=milestone, state="open")]
        except (GithubException, requests.RequestException) as e:
            msg = f"Failed to list issues of milestone #{milestone_number} in {repository}: {e}"
            raise RemoteError(msg) from e
