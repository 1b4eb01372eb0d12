"""
Pytest configuration and fixtures.

This module configures pytest behavior for different test types:
- Integration tests: Skipped unless GHMM_TEST_ORG is set, and fail on any
  warnings logged by the code under test
- Unit tests: Allow warnings, use the in-memory FakeProvider
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest
from typing_extensions import override

from github_milestone_manager.exceptions import RemoteError
from github_milestone_manager.models import IssueRef, MilestoneRecord, RepositoryRef

if TYPE_CHECKING:
    from collections.abc import Generator

_INTEGRATION_ENV_VAR = "GHMM_TEST_ORG"

# Store warning records during test execution
_integration_test_warnings: dict[str, list[logging.LogRecord]] = {}


@dataclass
class FakeProvider:
    """In-memory MilestoneProvider recording every call it receives."""

    pages: list[list[RepositoryRef]] = field(default_factory=list)
    milestones: dict[RepositoryRef, list[MilestoneRecord]] = field(default_factory=dict)
    issues: dict[tuple[RepositoryRef, int], list[IssueRef]] = field(default_factory=dict)
    failing_pages: set[int] = field(default_factory=set)
    failing_repos: set[RepositoryRef] = field(default_factory=set)
    failing_edits: set[tuple[RepositoryRef, int]] = field(default_factory=set)
    failing_issue_lists: set[RepositoryRef] = field(default_factory=set)
    page_requests: list[int | None] = field(default_factory=list)
    edits: list[tuple[RepositoryRef, int, dict[str, Any]]] = field(default_factory=list)
    issue_requests: list[tuple[RepositoryRef, int]] = field(default_factory=list)

    def list_repositories(self, org: str, page: int | None) -> tuple[list[RepositoryRef], int | None]:
        self.page_requests.append(page)
        index = (page or 1) - 1
        if index in self.failing_pages:
            msg = f"page {index + 1} of {org} failed"
            raise RemoteError(msg)
        repos = self.pages[index] if index < len(self.pages) else []
        next_page = index + 2 if index + 1 < len(self.pages) else None
        return list(repos), next_page

    def list_milestones(self, repository: RepositoryRef) -> list[MilestoneRecord]:
        if repository in self.failing_repos:
            msg = f"404 Not Found: {repository}"
            raise RemoteError(msg)
        return list(self.milestones.get(repository, []))

    def edit_milestone(self, repository: RepositoryRef, number: int, patch: dict[str, Any]) -> MilestoneRecord:
        self.edits.append((repository, number, patch))
        if (repository, number) in self.failing_edits:
            msg = "422 Validation Failed"
            raise RemoteError(msg)
        current = next(m for m in self.milestones[repository] if m.number == number)
        return MilestoneRecord(
            number=number,
            title=current.title,
            state=patch.get("state", current.state),
            due_on=patch.get("due_on", current.due_on),
        )

    def list_open_issues(self, repository: RepositoryRef, milestone_number: int) -> list[IssueRef]:
        self.issue_requests.append((repository, milestone_number))
        if repository in self.failing_issue_lists:
            msg = "502 Bad Gateway"
            raise RemoteError(msg)
        return list(self.issues.get((repository, milestone_number), []))


@pytest.fixture
def repo_a() -> RepositoryRef:
    return RepositoryRef("acme", "a")


@pytest.fixture
def repo_b() -> RepositoryRef:
    return RepositoryRef("acme", "b")


@pytest.fixture
def repo_c() -> RepositoryRef:
    return RepositoryRef("acme", "c")


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture(autouse=True)
def check_integration_test_env_vars(request: pytest.FixtureRequest) -> None:
    """Skip integration tests when no test organization is configured."""
    if request.node.get_closest_marker("integration") is None:
        return
    if not os.environ.get(_INTEGRATION_ENV_VAR):
        pytest.skip(
            f"Integration tests require environment variables: {_INTEGRATION_ENV_VAR} "
            "(a GitHub organization to read milestones from)"
        )


class IntegrationTestWarningHandler(logging.Handler):
    """Custom logging handler to capture warnings during integration tests."""

    test_nodeid: str

    def __init__(self, test_nodeid: str) -> None:
        super().__init__()
        self.test_nodeid = test_nodeid
        self.setLevel(logging.WARNING)

    @override
    def emit(self, record: logging.LogRecord) -> None:
        """Capture WARNING and above level logs."""
        _integration_test_warnings.setdefault(self.test_nodeid, []).append(record)


@pytest.fixture(autouse=True)
def fail_on_log_warnings_for_integration_tests(
    request: pytest.FixtureRequest,
) -> Generator[None]:
    """
    Automatically fail integration tests if any WARNING level logs are emitted from the code under test.

    Divergence and missing-milestone warnings are acceptable when running the tool
    as a user, but the integration test organization is expected to be consistent.
    """
    if request.node.get_closest_marker("integration") is None:
        yield
        return

    test_nodeid = request.node.nodeid
    _integration_test_warnings[test_nodeid] = []

    handler = IntegrationTestWarningHandler(test_nodeid)
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)

    try:
        yield
    finally:
        root_logger.removeHandler(handler)


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[None]
) -> Generator[None]:  # type: ignore[misc]
    """Mark a passed integration test as failed if warnings were logged during it."""
    outcome = yield
    report = outcome.get_result()

    if call.when == "call" and report.outcome == "passed":
        test_nodeid = item.nodeid
        warning_records = _integration_test_warnings.get(test_nodeid, [])

        if warning_records:
            warning_messages = [
                f"{record.levelname}: {record.getMessage()} (in {record.name}:{record.lineno})"
                for record in warning_records
            ]
            report.outcome = "failed"
            report.longrepr = f"Integration test failed: {len(warning_records)} warning(s) detected:\n" + "\n".join(
                f"  - {msg}" for msg in warning_messages
            )

        _integration_test_warnings.pop(test_nodeid, None)
