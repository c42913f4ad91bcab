#!/usr/bin/env python3
"""
Create or migrate the NR Permitting records SQLite database.

Applies every pending migration, then prints the schema version and
the round-trip latency of a ``SELECT 1`` against the database.

Usage:
    python init_record_db.py --db ./nr_permitting.db

If --db is omitted the DATABASE_URL setting is used.
"""

import argparse
import asyncio
import sys

from nr_permitting_api.app.core.config import settings
from nr_permitting_api.app.core.db import SQLiteStorage
from nr_permitting_api.app.core.logging_config import setup_logging


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Create or migrate the records database (SQLite).")
    ap.add_argument("--db", help=f"Path to SQLite DB file (default: {settings.database_url})")
    ap.add_argument("--log-level", default=settings.log_level, help="Logging level name")
    args = ap.parse_args(argv)

    setup_logging(args.log_level)
    storage = SQLiteStorage(args.db)
    try:
        version = storage.init_db()
        latency_ms = asyncio.run(storage.ping())
    except Exception as exc:
        print(f"[!] Failed to initialise {storage.database_path}: {exc}", file=sys.stderr)
        return 1

    print(f"[+] {storage.database_path} at schema version {version} ({latency_ms:.1f} ms)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
