#!/usr/bin/env python3
"""Schema migration CLI for the trade journal database."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Optional, Sequence

# Ensure repository root is importable when script is executed by path.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from journal.config import load_config
from journal.db import migrate
from journal.db.session import create_journal_engine

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trade journal schema migrations")
    parser.add_argument("--database-url", help="SQLAlchemy URL (defaults to JOURNAL_DATABASE_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    upgrade_cmd = sub.add_parser("upgrade", help="Apply migrations up to a revision")
    upgrade_cmd.add_argument("--revision", default="head")

    downgrade_cmd = sub.add_parser("downgrade", help="Revert migrations down to a revision")
    downgrade_cmd.add_argument("--revision", default="base")

    sub.add_parser("current", help="Print the applied revision")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = load_config()
    database_url = args.database_url or config.database_url

    engine = create_journal_engine(database_url, echo=config.sql_echo)
    try:
        with engine.connect() as conn:
            if args.command == "upgrade":
                migrate.upgrade(database_url, args.revision, connection=conn)
                conn.commit()
                payload = {"command": "upgrade", "revision": args.revision}
            elif args.command == "downgrade":
                migrate.downgrade(database_url, args.revision, connection=conn)
                conn.commit()
                payload = {"command": "downgrade", "revision": args.revision}
            else:
                payload = {"command": "current", "revision": migrate.current_revision(conn)}
    finally:
        engine.dispose()

    print(json.dumps(payload, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
