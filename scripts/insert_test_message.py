"""Insert one legacy message and read it back.

Exit codes: 0 ok, 1 DATABASE_URL missing, 2 insert/read failure.
"""
import logging
import sys

from ducktype.crud import messages as messages_crud
from ducktype.database import get_database_url, get_sessionmaker
from ducktype.models.conversation_models import LegacyMessage

logger = logging.getLogger("insert_test_message")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    try:
        get_database_url()
    except RuntimeError as e:
        logger.error("%s", e)
        return 1

    session = get_sessionmaker()()
    try:
        msg = messages_crud.create_message(
            session,
            user="Integration Test",
            ai=["This is a test insertion via API (simulated)"],
        )
        session.commit()
        fetched = session.get(LegacyMessage, msg.id)
        if fetched is None:
            logger.error("FAILED: inserted message %s not found", msg.id)
            return 2
        logger.info("inserted: id=%s created_at=%s", fetched.id, fetched.created_at.isoformat())
        return 0
    except Exception:
        session.rollback()
        logger.exception("FAILED")
        return 2
    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
