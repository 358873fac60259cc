from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import AuthSession
from .settings import settings

logger = logging.getLogger(__name__)


def purge_stale_sessions(db: Session, *, now: Optional[datetime] = None, retention_days: Optional[int] = None) -> int:
	days = settings.session_retention_days if retention_days is None else retention_days
	threshold = (now or datetime.utcnow()) - timedelta(days=days)
	# A session counts as stale once it has been idle past the threshold
	res = db.execute(delete(AuthSession).where(AuthSession.last_activity_at < threshold))
	db.commit()
	removed = res.rowcount or 0
	if removed:
		logger.info("Purged %d session(s) idle since before %s", removed, threshold.isoformat())
	return removed
