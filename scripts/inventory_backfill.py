"""
Rebuild the derived inventory table from the purchase and sales ledgers.

Every run recomputes all {branch_id}_{size} documents and replaces the table in
one transaction. On failure nothing is written; re-run the script.

Usage:
    python scripts/inventory_backfill.py
    python scripts/inventory_backfill.py --data-dir ~/tarp-data --branch nidagundi
"""

from __future__ import annotations

import argparse
import sys

from core.config import DEFAULT_BRANCH, resolve_settings
from core.db import connect, ensure_schema
from core.logging_config import configure_logging, get_logger
from core.services.backfill import rebuild_inventory

logger = get_logger("core.scripts.inventory_backfill")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rebuild the inventory collection from purchases and sales.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Data directory holding app.db (default: resolved from environment/settings)",
    )
    parser.add_argument(
        "--branch",
        default=DEFAULT_BRANCH,
        help=f"Branch used for records without one (default: {DEFAULT_BRANCH})",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: TARP_DASH_LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    settings = resolve_settings(args.data_dir)
    conn = connect(settings.db_path)
    try:
        ensure_schema(conn)
        written = rebuild_inventory(conn, default_branch=args.branch)
    except Exception:
        logger.exception("Inventory backfill failed; no documents were written")
        return 1
    finally:
        conn.close()

    print(f"Inventory collection created and initialized ({written} documents).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
