"""Entry point for the team lead time analyzer."""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional, Sequence

from .analysis import run_analysis
from .cli import parse_args
from .config import load_config
from .errors import AuthenticationError, ConfigurationError, RemoteError, ResolutionError
from .github_client import GitHubClient
from .report import chart_series, generate_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_REMOTE_ERROR = 4


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def orchestrate_lead_time_analysis(argv: Optional[Sequence[str]] = None) -> int:
    """Run one analysis from command-line arguments and print the result.

    Returns:
        Process exit code.
    """
    try:
        args = parse_args(argv)
        configure_logging(args.verbose)

        config = load_config(
            organization=args.org,
            team_slugs=args.teams,
            unit=args.unit,
            value=args.value,
            token=args.token,
        )
        client = GitHubClient(config=config)

        print(
            f"Analyzing lead time for {', '.join(config.team_slugs)} in '{config.organization}'...",
            file=sys.stderr,
        )
        result = run_analysis(
            client=client,
            organization=config.organization,
            team_slugs=config.team_slugs,
            unit=config.unit,
            value=config.value,
        )

        if args.json:
            payload = result.to_dict()
            payload["chart"] = chart_series(result)
            print(json.dumps(payload, indent=2))
        else:
            print(generate_report(result))
        return EXIT_OK
    except ConfigurationError as exc:
        for problem in exc.problems:
            print(f"ERROR: {problem}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except AuthenticationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION_ERROR
    except (ResolutionError, RemoteError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_REMOTE_ERROR
    except Exception:
        logger.exception("Unexpected error during lead time analysis")
        return EXIT_UNEXPECTED_ERROR


def main(argv: Optional[Sequence[str]] = None) -> int:
    return orchestrate_lead_time_analysis(argv)


if __name__ == "__main__":
    raise SystemExit(main())
