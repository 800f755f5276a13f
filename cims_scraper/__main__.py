#!/usr/bin/env python3
"""
Command line entry point for the 100 Cims scraper.

Usage:
    python -m cims_scraper              # Ask for confirmation, then scrape
    python -m cims_scraper --yes        # Skip the confirmation prompt
    python -m cims_scraper --concurrency 5 --output cims.json
"""

import argparse
import asyncio
import sys

from .base import Colors
from .console import ConsolePrompt, print_banner
from .exceptions import ScraperError
from .logs import configure_logging
from .pipeline import AlwaysProceed, run_pipeline
from .settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cims-scraper',
        description="Scrape the FEEC 100 Cims catalog with geolocation into a JSON file"
    )
    parser.add_argument('--yes', '-y', action='store_true', help='Do not ask for confirmation')
    parser.add_argument('--concurrency', type=int, help='Max concurrent detail requests (default 15)')
    parser.add_argument('--output', '-o', type=str, help='Output JSON file')
    parser.add_argument('--log-level', type=str, help='Logging level (DEBUG, INFO, ...)')
    return parser


def report_failure(reason: str):
    print(Colors.red(f"Alguna cosa ha anat malament a l'execució de l'scraper: {reason}"), file=sys.stderr)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.concurrency is not None and args.concurrency < 1:
        parser.error("--concurrency must be at least 1")

    overrides = {}
    if args.concurrency is not None:
        overrides['max_concurrent_requests'] = args.concurrency
    if args.output:
        overrides['output_file'] = args.output
    if args.log_level:
        overrides['log_level'] = args.log_level
    settings = Settings(**overrides)

    configure_logging(settings)
    print_banner()

    # Ask before the event loop starts; input() blocks
    confirm = AlwaysProceed() if args.yes else ConsolePrompt()
    if not confirm.confirm_proceed():
        return 0

    try:
        result = asyncio.run(run_pipeline(settings))
    except ScraperError as e:
        report_failure(str(e))
        return 1
    except Exception as e:
        # Unexpected errors are logged by the pipeline with their type
        report_failure(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        print(Colors.red("Execució interrompuda"), file=sys.stderr)
        return 130

    print(Colors.green(
        f"\nS'han desat les dades de {result.total} muntanyes al fitxer {result.output_path}!"
    ))
    print(Colors.green("Molta sort amb el repte dels 100 cims!\n"))
    return 0


if __name__ == '__main__':
    sys.exit(main())
