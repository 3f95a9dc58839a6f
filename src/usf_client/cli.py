# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Command line entry point.

Sends a single operation using credentials from USF_* environment
variables and prints the JSON result:

    python -m usf_client find --query '{"color.name": "Blue"}'
    python -m usf_client updateOne --query '{"hardcode": "A1"}' --document '{"$set": {"packageQuantity": 5}}'
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from .client import create_client, is_error
from .config import configure_logging, get_settings
from .exceptions import UsfError
from .operations import OperationKind

logger = logging.getLogger(__name__)


def _json_argument(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not valid JSON: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='usf-client',
        description='Send one operation to the USF inventory API'
    )

    parser.add_argument(
        'operation',
        choices=[op.value for op in OperationKind],
        help='Operation to perform'
    )

    parser.add_argument(
        '--query',
        type=_json_argument,
        help='Query, pipeline or bulk operations as JSON'
    )

    parser.add_argument(
        '--document',
        type=_json_argument,
        help='Item(s) or update document as JSON'
    )

    parser.add_argument(
        '--options',
        type=_json_argument,
        help='Operation options as JSON'
    )

    parser.add_argument(
        '--base-url',
        help='USF API endpoint (default: USF_BASE_URL or https://api.usfnode.com)'
    )

    parser.add_argument(
        '--raise-errors',
        action='store_true',
        help='Raise API errors instead of returning them'
    )

    parser.add_argument(
        '--log-level',
        help='Logging level (default: USF_LOG_LEVEL or INFO)'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line client. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    overrides = {}
    if args.base_url:
        overrides['base_url'] = args.base_url
    if args.raise_errors:
        overrides['silent_return'] = False

    try:
        client = create_client(settings, **overrides)
        result = asyncio.run(
            client.request(args.operation, args.query, args.document, args.options)
        )
    except (UsfError, ValueError) as e:
        logger.debug("Request failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 1 if is_error(result) else 0
