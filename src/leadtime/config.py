"""Configuration parsing and validation for the team lead time analyzer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import AuthenticationError, ConfigurationError
from .periods import TIME_UNITS, normalize_unit

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class Config:
    """Validated runtime settings for one analysis run."""

    organization: str
    team_slugs: Tuple[str, ...]
    unit: str
    value: int
    token: str
    api_url: str = DEFAULT_API_URL


def load_config(
    organization: str,
    team_slugs: Iterable[str],
    unit: str,
    value: int,
    token: Optional[str] = None,
) -> Config:
    """Build and validate application configuration.

    Args:
        organization: GitHub organization login.
        team_slugs: One or more team slugs inside the organization.
        unit: Calendar unit of the trailing window (``day``, ``week``, ``month``
            or ``year``; plural forms are accepted).
        value: Positive number of units in the trailing window.
        token: Explicit credential; falls back to ``GITHUB_TOKEN``.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If any field is missing or invalid. Every offending
            field contributes its own message.
        AuthenticationError: If no credential is configured.
    """
    problems: List[str] = []

    organization = (organization or "").strip()
    if not organization:
        problems.append("Organization name is required.")

    slugs = tuple(dict.fromkeys(slug.strip() for slug in team_slugs or () if slug and slug.strip()))
    if not slugs:
        problems.append("At least one team slug is required.")

    normalized_unit = ""
    try:
        normalized_unit = normalize_unit(unit)
    except ValueError:
        problems.append(
            f"Invalid value for 'unit': expected one of {', '.join(TIME_UNITS)}."
        )

    if value is None or value <= 0:
        problems.append("Invalid value for 'value': expected an integer greater than 0.")

    if problems:
        raise ConfigurationError(problems)

    credential = (token if token is not None else os.getenv("GITHUB_TOKEN", "")).strip()
    if not credential:
        raise AuthenticationError(
            "GitHub token is required. "
            "Pass --token or set the 'GITHUB_TOKEN' environment variable."
        )

    api_url = os.getenv("GITHUB_API_URL", "").strip() or DEFAULT_API_URL

    return Config(
        organization=organization,
        team_slugs=slugs,
        unit=normalized_unit,
        value=value,
        token=credential,
        api_url=api_url.rstrip("/"),
    )
