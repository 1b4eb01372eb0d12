"""
Line-oriented rendering of aggregated milestones.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .due_dates import format_due_date

if TYPE_CHECKING:
    from collections.abc import Callable

    from .aggregator import AggregationResult
    from .models import AggregatedMilestone


def format_milestone_line(milestone: AggregatedMilestone) -> str:
    """Format a milestone as ``title<TAB>due date<TAB>repo,repo``."""
    repos = ",".join(str(r) for r in milestone.sorted_repositories())
    return f"{milestone.title}\t{format_due_date(milestone.due_on)}\t{repos}"


def render_milestones(result: AggregationResult, emit: Callable[[str], None] = print) -> None:
    """Emit one line per milestone title, sorted by title."""
    for title in sorted(result.milestones):
        emit(format_milestone_line(result.milestones[title]))
