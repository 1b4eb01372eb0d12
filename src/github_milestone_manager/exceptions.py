"""
Custom exception classes for the GitHub milestone manager.
"""

from __future__ import annotations


class MilestoneManagerError(Exception):
    """Base exception for milestone manager errors."""


class RemoteError(MilestoneManagerError):
    """Raised by a milestone provider when a remote API call fails."""


class ArgumentError(MilestoneManagerError, ValueError):
    """Raised when a required input is missing or malformed."""


class RepositoryLookupError(MilestoneManagerError, LookupError):
    """Raised when the repository set of a target cannot be resolved."""


class FetchError(MilestoneManagerError):
    """Raised when listing milestones or issues of a repository fails."""


class MutationError(MilestoneManagerError):
    """Raised when editing a single milestone fails."""


class UnsupportedIntentError(MilestoneManagerError, NotImplementedError):
    """Raised for milestone operations that are not supported."""
