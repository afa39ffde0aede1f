"""Create all tables on the configured database."""
import logging

from huddle.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    logger.info("Database initialized.")
