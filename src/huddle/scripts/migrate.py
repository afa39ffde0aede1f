# src/huddle/scripts/migrate.py
"""Apply or roll back Alembic revisions against ``DATABASE_URL``."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from huddle.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def build_config() -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    return cfg


def run_upgrade_head() -> None:
    run_upgrade("head")


def run_upgrade(revision: str) -> None:
    logger.info("Upgrading database to %s", revision)
    command.upgrade(build_config(), revision)


def run_downgrade(revision: str) -> None:
    logger.info("Downgrading database to %s", revision)
    command.downgrade(build_config(), revision)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    sub = parser.add_subparsers(dest="action")
    up = sub.add_parser("upgrade", help="apply revisions (default: head)")
    up.add_argument("revision", nargs="?", default="head")
    down = sub.add_parser("downgrade", help="roll back to a revision")
    down.add_argument("revision")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())
    if args.action == "downgrade":
        run_downgrade(args.revision)
    else:
        run_upgrade(getattr(args, "revision", "head"))


if __name__ == "__main__":
    main()
