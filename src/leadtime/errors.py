"""Custom exception types for the team lead time analyzer."""

from __future__ import annotations

from typing import List, Optional


class LeadTimeError(Exception):
    """Base exception for all recoverable lead time analysis errors."""


class ConfigurationError(LeadTimeError):
    """Raised when runtime configuration values are missing or invalid.

    ``problems`` holds one user-facing message per offending field.
    """

    def __init__(self, problems: List[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class AuthenticationError(LeadTimeError):
    """Raised when the GitHub credential is unavailable."""


class RemoteError(LeadTimeError):
    """Raised when a GitHub API request fails or returns an unexpected response."""

    def __init__(self, status: Optional[int], message: str) -> None:
        self.status = status
        self.message = message
        prefix = f"HTTP {status}" if status is not None else "Request failed"
        super().__init__(f"{prefix}: {message}")


class ResolutionError(LeadTimeError):
    """Raised when team members or team repositories cannot be resolved."""

    def __init__(self, team_slug: str, message: str) -> None:
        self.team_slug = team_slug
        super().__init__(message)


class RepositoryAssemblyError(LeadTimeError):
    """Raised when the pull requests of a single repository cannot be assembled."""

    def __init__(self, repository: str, message: str) -> None:
        self.repository = repository
        super().__init__(message)
