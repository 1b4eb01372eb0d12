"""
Dry-run gate deciding whether a planned milestone change is sent or only reported.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .due_dates import format_timestamp
from .exceptions import MutationError, RemoteError

if TYPE_CHECKING:
    from collections.abc import Callable

    from .config import ReconcileConfig
    from .models import PlannedChange
    from .protocols import MilestoneProvider

logger: logging.Logger = logging.getLogger(__name__)


def describe_change(change: PlannedChange, *, done: bool) -> str:
    """Describe a change, in past tense when it has been applied."""
    subject = f"milestone {change.title} (#{change.number}) in repo {change.repository}"
    if "due_on" in change.patch:
        verb = "changed" if done else "would change"
        return (
            f"{verb} {subject} due date from {format_timestamp(change.current)} to {format_timestamp(change.desired)}"
        )
    verb = "closed" if done else "would close"
    return f"{verb} {subject}"


class DryRunGate:
    """Sends a change only when the run is confirmed, and reports it either way."""

    def __init__(
        self,
        provider: MilestoneProvider,
        config: ReconcileConfig,
        emit: Callable[[str], None] = print,
    ) -> None:
        self.provider: MilestoneProvider = provider
        self.config: ReconcileConfig = config
        self.emit: Callable[[str], None] = emit

    def apply(self, change: PlannedChange) -> bool:
        """Apply or report a change.

        Returns:
            True if the change was sent to the remote, False for a dry run

        Raises:
            MutationError: If the edit call fails
        """
        if not self.config.confirm:
            self.emit(describe_change(change, done=False))
            return False

        try:
            self.provider.edit_milestone(change.repository, change.number, change.patch)
        except RemoteError as e:
            msg = f"Failed to edit milestone {change.title} (#{change.number}) in repo {change.repository}: {e}"
            raise MutationError(msg) from e
        logger.debug(f"Applied {change.patch} to milestone #{change.number} in {change.repository}")
        self.emit(describe_change(change, done=True))
        return True
