"""
Run configuration shared by the mutation planner and the dry-run gate.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReconcileConfig:
    """Settings fixed once per invocation.

    Mutations are only sent to the remote when ``confirm`` is set; the default
    is a dry run that only reports what would change.
    """

    confirm: bool = False
