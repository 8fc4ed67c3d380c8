"""Daily release/failure counts for the last 30 days."""
from __future__ import annotations

import datetime
from typing import Optional

from docshost.db import app_session
from docshost.db.models import Release
from docshost.db.repositories import config_repo
from docshost.utils.logging import get_logger

LOG = get_logger("release_activity_service")

CONFIG_KEY = "release_activity"
DAYS = 30


def update_release_activity(now: Optional[datetime.datetime] = None) -> dict:
    """Recompute the activity series and store it under ``release_activity``.

    Day ``n`` covers releases strictly between ``now - (n+1) days`` and
    ``now - n days``. Series are returned oldest first.
    """
    now = now or datetime.datetime.utcnow()
    dates, counts, failures = [], [], []
    with app_session() as session:
        for day in range(DAYS):
            upper = now - datetime.timedelta(days=day)
            lower = now - datetime.timedelta(days=day + 1)
            window = session.query(Release).filter(
                Release.release_time < upper,
                Release.release_time > lower,
            )
            counts.append(window.count())
            failures.append(
                window.filter(
                    Release.is_library.is_(True),
                    Release.build_status.is_(False),
                ).count()
            )
            dates.append(upper.strftime("%d %b"))
    dates.reverse()
    counts.reverse()
    failures.reverse()
    activity = {"dates": dates, "counts": counts, "failures": failures}
    config_repo.set_value(CONFIG_KEY, activity)
    LOG.info("Release activity updated total=%s failures=%s", sum(counts), sum(failures))
    return activity


def get_release_activity() -> dict:
    return config_repo.get_value(CONFIG_KEY, default={}) or {}


__all__ = ["update_release_activity", "get_release_activity", "CONFIG_KEY"]
