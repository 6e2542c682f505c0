"""Command-line argument parsing for the team lead time analyzer."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .periods import TIME_UNITS


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for lead time analysis.

    Returns:
        Parsed CLI arguments containing organization, team slugs, window unit
        and value, and output options.
    """
    parser = argparse.ArgumentParser(
        prog="gh-team-lead-time",
        description=(
            "Compute pull request lead time (first commit to merge) for the members "
            "of one or more GitHub teams."
        ),
    )

    parser.add_argument(
        "--org",
        required=True,
        help="GitHub organization name.",
    )
    parser.add_argument(
        "--team",
        dest="teams",
        action="append",
        required=True,
        help="Team slug to analyze (repeatable).",
    )
    parser.add_argument(
        "--unit",
        choices=[f"{unit}s" for unit in TIME_UNITS] + list(TIME_UNITS),
        default="months",
        help="Calendar unit of the trailing window (default: months).",
    )
    parser.add_argument(
        "--value",
        type=_positive_int,
        default=1,
        help="Number of units in the trailing window (default: 1).",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="GitHub token; defaults to the GITHUB_TOKEN environment variable.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON instead of a text report.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)
