"""
CLI entrypoint for the refresh token cleanup job. Run from cron, e.g.:

  python -m app.token_cleanup

Or hourly: 0 * * * * cd /path/to/newsfeed && .venv/bin/python -m app.token_cleanup

The API process also runs the same sweep in the background when
TOKEN_CLEANUP_ENABLED is true.
"""

import logging
import sys

from app.core.database import SessionLocal
from app.services.token_cleanup import cleanup_expired_tokens

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run one cleanup sweep: delete expired and revoked refresh tokens."""
    db = SessionLocal()
    try:
        tokens_deleted = cleanup_expired_tokens(db)
        logger.info("Token cleanup completed: tokens_deleted=%s", tokens_deleted)
        return 0
    except Exception as e:
        logger.exception("Token cleanup failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
