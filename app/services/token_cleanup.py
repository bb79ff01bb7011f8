"""Refresh token housekeeping: delete expired or revoked rows, once or on a schedule."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models import RefreshToken

logger = logging.getLogger(__name__)


def cleanup_expired_tokens(session: Session) -> int:
    """
    Delete refresh tokens that are expired or revoked and return how many were removed.

    Idempotent: safe to run repeatedly. Validity checks already ignore such rows,
    so this only keeps the table small.
    """
    now = datetime.now(timezone.utc)
    deleted_count = (
        session.query(RefreshToken)
        .filter(or_(RefreshToken.expires_at < now, RefreshToken.is_revoked.is_(True)))
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Token cleanup run: now=%s, tokens_deleted=%s",
            now.isoformat(),
            deleted_count,
        )
    return deleted_count


class TokenCleanupScheduler:
    """
    Registers cleanup_expired_tokens as an APScheduler interval job.

    Each run gets its own session from session_factory and executes on the
    scheduler's worker thread. A failed run is logged and the next tick runs as usual.
    """

    JOB_ID = "token_cleanup"

    def __init__(self, session_factory: Callable[[], Session], interval_seconds: float) -> None:
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.scheduler = BackgroundScheduler()
        self._jobs_registered = False

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        if self.running:
            return
        self._register_jobs()
        self.scheduler.start()
        logger.info("Token cleanup scheduled every %s seconds", self.interval_seconds)

    def _register_jobs(self) -> None:
        if self._jobs_registered:
            return
        self.scheduler.add_job(
            func=self.run_once,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=self.JOB_ID,
            name="Delete expired and revoked refresh tokens",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._jobs_registered = True

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Token cleanup scheduler shutdown")

    def run_once(self) -> int | None:
        """Run one sweep; returns the deleted count, or None if the run failed."""
        try:
            db = self.session_factory()
            try:
                return cleanup_expired_tokens(db)
            finally:
                db.close()
        except Exception as e:
            logger.exception("Token cleanup job failed: %s", e)
            return None
