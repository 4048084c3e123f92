# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Command line entry point for the PALoSA pseudonymization pipeline.

Commands:
    run     pseudonymize the uploads of an existing session folder
    sweep   remove sessions that have been idle for longer than the session TTL

The secret key and data root are read from the environment (PSEUDO_KEY,
PSEUDO_DATA_ROOT), optionally through a .env file.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from core.exceptions import PseudonymizationError
from core.processor import run_pipeline
from core.utils.config import PipelineConfig
from core.utils.logger import setup_logging
from core.utils.progress_tracker import ProgressTracker
from core.utils.session_dirs import sweep_expired_sessions

logger = setup_logging()


def parse_cli_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for CLI usage.

    Returns:
        Parsed arguments

    """
    parser = argparse.ArgumentParser(
        description='Pseudonymize uploaded log, JSON and XML files of a session.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        '--env_file',
        default=None,
        help="""
             Optional .env file with PSEUDO_KEY, PSEUDO_DATA_ROOT, PSEUDONYM_LENGTH and SESSION_TTL.
             """,
    )
    parser.add_argument(
        '--log_level',
        default=None,
        help="""
             Log level (DEBUG, INFO, WARNING, ERROR), defaults to the LOG_LEVEL environment variable.
             """,
    )

    commands = parser.add_subparsers(dest='command', required=True)

    run_parser = commands.add_parser(
        'run',
        help='Pseudonymize the uploads of a session.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    run_parser.add_argument(
        '--session',
        required=True,
        help="""
             Session id, the name of the folders below uploads/, output/ and download/.
             """,
    )
    run_parser.add_argument(
        '--settings',
        required=True,
        help="""
             JSON file with logSettings, jsonSettings, xmlSettings and regexSettings.
             """,
    )
    run_parser.add_argument(
        '--no_progress',
        action='store_true',
        help='Do not show the progress bar.',
    )

    commands.add_parser(
        'sweep',
        help='Remove sessions idle for longer than the session TTL.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    return parser.parse_args(argv)


def load_settings(settings_file: str) -> dict:
    """Load the settings object of a run from a JSON file."""
    settings = json.loads(Path(settings_file).read_text(encoding='utf-8'))

    if not isinstance(settings, dict):
        message = f'Settings file "{settings_file}" must contain a JSON object.'
        raise TypeError(message)

    return settings


def main(argv: list[str] | None = None) -> int:
    """Parse command-line arguments and run the selected command."""
    args = parse_cli_arguments(argv)

    if args.log_level:
        setup_logging(args.log_level)

    try:
        config = PipelineConfig.from_environment(args.env_file)

        if args.command == 'sweep':
            sweep_expired_sessions(config)
            return 0

        settings = load_settings(args.settings)
        tracker = ProgressTracker(show=not args.no_progress)

        try:
            archive_path = run_pipeline(args.session, settings, config, tracker=tracker)
        finally:
            tracker.finalize_progress(complete=tracker.progress == 100)

    except (PseudonymizationError, OSError, TypeError, ValueError) as error:
        logger.error('%s: %s', type(error).__name__, error)  # noqa: TRY400
        return 1

    logger.info('Pseudonymized files written to %s', archive_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
