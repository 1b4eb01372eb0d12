"""
GitHub Milestone Manager

Reconciles milestones across all repositories of a GitHub organization,
treating milestones with the same title as one organization-wide milestone.
"""

from __future__ import annotations

from .aggregator import AggregationResult, MilestoneAggregator, aggregate_milestones
from .cli import main
from .config import ReconcileConfig
from .exceptions import (
    ArgumentError,
    FetchError,
    MilestoneManagerError,
    MutationError,
    RemoteError,
    RepositoryLookupError,
    UnsupportedIntentError,
)
from .planner import MutationPlanner, PlanResult
from .resolver import resolve_repositories
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "AggregationResult",
    "ArgumentError",
    "FetchError",
    "MilestoneAggregator",
    "MilestoneManagerError",
    "MutationError",
    "MutationPlanner",
    "PlanResult",
    "ReconcileConfig",
    "RemoteError",
    "RepositoryLookupError",
    "UnsupportedIntentError",
    "aggregate_milestones",
    "main",
    "resolve_repositories",
    "setup_logging",
]
