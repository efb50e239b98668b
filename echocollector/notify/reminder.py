"""
Weekly reflection reminder.

Works out when the next reminder is due. Delivery is up to the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from echocollector.core.config import Config, WEEKDAYS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reminder:
    """A reminder notification."""
    title: str
    body: str
    due_at: datetime


REMINDER_TITLE = "Weekly Reflection"
REMINDER_BODY = "Take a moment to reflect on your financial echoes"


def next_reminder_time(config: Config, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Next occurrence of the configured weekday and hour.

    Returns an aware datetime in the configured timezone, or None when
    reminders are turned off. A reminder due exactly now is returned
    as-is.
    """
    if not config.reminder_enabled:
        return None

    tz = ZoneInfo(config.timezone)
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    else:
        now = now.astimezone(tz)

    target_weekday = WEEKDAYS.index(config.reminder_weekday)
    days_ahead = (target_weekday - now.weekday()) % 7

    candidate = (now + timedelta(days=days_ahead)).replace(
        hour=config.reminder_hour, minute=0, second=0, microsecond=0
    )
    if candidate < now:
        candidate += timedelta(days=7)

    return candidate


def next_reminder(config: Config, now: Optional[datetime] = None) -> Optional[Reminder]:
    """Build the next reminder, or None when reminders are off."""
    due_at = next_reminder_time(config, now)
    if due_at is None:
        logger.info("Reflection reminder disabled")
        return None

    logger.info(f"Next reflection reminder: {due_at.isoformat()}")
    return Reminder(title=REMINDER_TITLE, body=REMINDER_BODY, due_at=due_at)
