"""Command Line Interface for the activity record store.

This module provides a CLI for storing and browsing activity records through the
configured backing API (see ``streamlog.config``).

The CLI supports the following commands:
    - store: Store one record or a list of records
    - query: List records with optional filters and paging
    - distinct: Show the values currently used by a field
    - meta: Show the metadata of a record

JSON input can be provided either as a direct string or as a file path prefixed with '@'.

Example Usage:
    python -m streamlog cli store '{"summary": "Post updated", "author": 1, "context": "post"}'
    python -m streamlog cli store @records.json
    python -m streamlog cli query --context post --per-page 10
    python -m streamlog cli distinct context
    python -m streamlog cli meta 4f2a... --key post_title --single
"""

import argparse
import asyncio
import json
import os
from typing import Any, Dict, List, Optional

from streamlog.config import create_api, load_settings
from streamlog.core.exceptions import ConfigurationError, QueryError, StorageError
from streamlog.infrastructure.storage import RecordStore
from streamlog.search import RecordQuery
from streamlog.utils import setup_logging

# Query options that map directly onto record fields
FILTER_OPTIONS = ("author", "author_role", "connector", "context", "action", "ip", "object_id")


def parse_json_input(json_str: str) -> Any:
    """Parse JSON input from either a string or file.

    Args:
        json_str (str): Either a JSON string or a file path prefixed with '@'.
                       Relative file paths resolve against the current directory.

    Returns:
        Any: Parsed JSON data.

    Raises:
        ValueError: If the JSON is invalid or the specified file is not found.
    """
    if json_str.startswith("@"):
        file_path = json_str[1:]
        if not os.path.isabs(file_path):
            file_path = os.path.join(os.getcwd(), file_path)

        if not os.path.exists(file_path):
            raise ValueError(f"File not found: {file_path}")

        with open(file_path, "r") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {file_path}: {e}")

    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON input: {e}")


def build_query(args: argparse.Namespace) -> RecordQuery:
    """Translate parsed ``query`` arguments into a record query.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    Returns:
        RecordQuery: Query ready to be turned into a search body.
    """
    query = RecordQuery(
        search=args.search,
        date_from=args.date_from,
        date_to=args.date_to,
        page=args.page,
        page_size=args.per_page,
        fields=args.fields.split(",") if args.fields else None,
    )
    for option in FILTER_OPTIONS:
        value = getattr(args, option, None)
        if value is not None:
            query.where(option, value)
    return query


async def store_records(store: RecordStore, records_data: List[Dict[str, Any]]) -> List[Any]:
    """Store multiple records and report each outcome.

    Args:
        store (RecordStore): The record store.
        records_data (List[Dict[str, Any]]): List of record dictionaries.

    Returns:
        List[Any]: Result of each store call (ID, error, or False).
    """
    results = []
    for record in records_data:
        if not isinstance(record, dict):
            raise ValueError(f"Record must be a JSON object: {record!r}")
        result = await store.store(record)
        results.append(result)

        if isinstance(result, StorageError):
            print(f"- error: {result}")
        elif result is False:
            print("- skipped: no recognized fields")
        else:
            print(f"- stored {result}")
    return results


async def list_records(store: RecordStore, query: RecordQuery) -> None:
    """Display a page of records and the total found.

    Args:
        store (RecordStore): The record store.
        query (RecordQuery): Query to run.
    """
    records = await store.query(query.to_search_body(), query.fields)
    if not records:
        print("No records found.")
        return

    print(f"Found {store.get_found_rows()} records:")
    for record in records:
        created = record.get("created", "")
        summary = record.get("summary", "")
        print(f"- [{record.get('ID')}] {created} {summary}")
        print(f"  {record.get('connector', '')}/{record.get('context', '')}/{record.get('action', '')}")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(description="Activity record store CLI")
    parser.add_argument("--log-level", default=None, help="Override STREAMLOG_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    store = subparsers.add_parser("store", help="Store one or more records")
    store.add_argument("data", help="JSON string or @filename containing a record or a list")

    query = subparsers.add_parser("query", help="List records")
    query.add_argument("--search", help="Text to look for in the summary")
    for option in FILTER_OPTIONS:
        query.add_argument(f"--{option.replace('_', '-')}", dest=option, help=f"Filter by {option}")
    query.add_argument("--date-from", help="Earliest creation date (YYYY-MM-DD)")
    query.add_argument("--date-to", help="Latest creation date (YYYY-MM-DD)")
    query.add_argument("--page", type=int, default=1, help="Page number")
    query.add_argument("--per-page", type=int, default=20, help="Records per page")
    query.add_argument("--fields", help="Comma separated fields to return")

    distinct = subparsers.add_parser("distinct", help="List values used by a field")
    distinct.add_argument("field", help="Record field, e.g. context")

    meta = subparsers.add_parser("meta", help="Show record metadata")
    meta.add_argument("record_id", help="Record ID")
    meta.add_argument("--key", default="", help="Meta key to show")
    meta.add_argument("--single", action="store_true", help="Unwrap a single value")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application.

    Returns:
        int: Process exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return 2

    setup_logging(args.log_level or settings.log_level)

    api = create_api(settings)
    try:
        await api.initialize()
    except StorageError as e:
        print(f"Storage error: {e}")
        return 1
    store = RecordStore(api)

    try:
        if args.command == "store":
            data = parse_json_input(args.data)
            if not isinstance(data, list):
                data = [data]
            results = await store_records(store, data)
            return 1 if any(isinstance(r, StorageError) for r in results) else 0

        elif args.command == "query":
            await list_records(store, build_query(args))

        elif args.command == "distinct":
            for value in await store.get_distinct_field_values(args.field):
                print(f"- {value}")

        elif args.command == "meta":
            meta = await store.get_meta(args.record_id, args.key, args.single)
            print(json.dumps(meta, indent=2, default=str))

    except (ValueError, QueryError) as e:
        print(f"Error: {e}")
        return 1

    finally:
        # Ensure proper cleanup of backing API resources
        await api.cleanup()

    return 0


def run() -> None:
    """Console script entry point."""
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
