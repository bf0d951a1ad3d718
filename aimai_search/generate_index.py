"""Build a search index from a JSON file of records and save it as JSON.

Usage:
    python -m aimai_search.generate_index --input records.json --output index.json [--key title --key author]

The saved index can be loaded by the service (``DATA_FILE``) or by
``SearchEngine.load`` to skip the build step.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

import structlog

from .core.errors import AimaiError
from .core.index import IndexBuilder
from .core.persistence import load_json, save_index
from .core.reading import get_reading_provider
from .models.options import SearchOptions

logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a search index from a JSON array of records.")
    parser.add_argument("--input", required=True, help="JSON file containing an array of records")
    parser.add_argument("--output", required=True, help="Where to write the index JSON")
    parser.add_argument(
        "--key",
        dest="keys",
        action="append",
        default=[],
        help="Field to index for object records (repeatable, order is kept)",
    )
    parser.add_argument("--no-kana-normalization", action="store_true", help="Only lower-case the text")
    parser.add_argument("--no-long-vowel", action="store_true", help="Keep long vowel marks as they are")
    parser.add_argument("--no-iteration-mark", action="store_true", help="Keep iteration marks as they are")
    return parser.parse_args(argv)


async def generate_index(args: argparse.Namespace) -> int:
    """Build and save the index; returns the number of indexed records."""
    options = SearchOptions(
        keys=tuple(args.keys),
        use_kana_normalization=not args.no_kana_normalization,
        normalize_long_vowel=not args.no_long_vowel,
        expand_iteration_mark=not args.no_iteration_mark,
    )

    logger.info("Reading input file", path=args.input)
    records = load_json(args.input)
    if not isinstance(records, list):
        raise ValueError("Input file must contain a JSON array")

    index = await IndexBuilder().build(records, options, get_reading_provider())

    logger.info("Writing index", path=args.output)
    save_index(index, args.output)
    return len(index)


def main(argv: Optional[List[str]] = None) -> int:
    structlog.configure(processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ])
    args = parse_args(argv)

    try:
        total = asyncio.run(generate_index(args))
    except (OSError, ValueError, AimaiError) as e:
        logger.error("Index generation failed", error=str(e))
        return 1

    logger.info("Index generation complete", total_records=total)
    return 0


if __name__ == "__main__":
    sys.exit(main())
