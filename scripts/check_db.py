"""Connectivity check: ping the database and list its tables.

Exit codes: 0 ok, 1 DATABASE_URL missing, 2 connection/query failure.
"""
import logging
import sys

from sqlalchemy import inspect, text
from sqlalchemy.engine import make_url

from ducktype.database import get_database_url, get_engine

logger = logging.getLogger("check_db")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    try:
        url = get_database_url()
    except RuntimeError as e:
        logger.error("%s", e)
        return 1

    try:
        engine = get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        tables = inspect(engine).get_table_names()
    except Exception:
        logger.exception("FAILED")
        return 2

    # host only, never credentials
    logger.info("connected: host=%s tables=%s", make_url(url).host or "local", ", ".join(tables) or "(none)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
