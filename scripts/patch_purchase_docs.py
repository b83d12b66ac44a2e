"""
Fill missing fields on stored purchases with the schema defaults.

Fields that already hold a value are left untouched. All updates are committed
together; on failure none are.

Usage:
    python scripts/patch_purchase_docs.py --data-dir ~/tarp-data
"""

from __future__ import annotations

import argparse
import sys

from core.config import resolve_settings
from core.db import connect, ensure_schema
from core.logging_config import configure_logging, get_logger
from core.services.backfill import patch_purchase_defaults

logger = get_logger("core.scripts.patch_purchase_docs")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Patch purchase records with default values for missing fields.",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Data directory holding app.db (default: resolved from environment/settings)",
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
        patched = patch_purchase_defaults(conn)
    except Exception:
        logger.exception("Purchase patch failed; no records were changed")
        return 1
    finally:
        conn.close()

    print(f"Patched {patched} purchase record(s) with default schema values.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
