"""
Tests for the weekly reflection reminder schedule.
"""

import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from echocollector.core.config import Config
from echocollector.notify.reminder import REMINDER_TITLE, next_reminder, next_reminder_time

UTC = ZoneInfo("UTC")


def _config(**overrides):
    fields = dict(reminder_enabled=True, reminder_weekday="sunday", reminder_hour=10, timezone="UTC")
    fields.update(overrides)
    return Config(**fields)


class TestNextReminderTime:
    """Test the next due time."""

    def test_later_this_week(self):
        """Wednesday noon -> the coming Sunday at 10:00."""
        now = datetime(2026, 10, 14, 12, 0, tzinfo=UTC)
        assert next_reminder_time(_config(), now) == datetime(2026, 10, 18, 10, 0, tzinfo=UTC)

    def test_due_exactly_now(self):
        now = datetime(2026, 10, 18, 10, 0, tzinfo=UTC)
        assert next_reminder_time(_config(), now) == now

    def test_just_missed_rolls_to_next_week(self):
        now = datetime(2026, 10, 18, 11, 0, tzinfo=UTC)
        assert next_reminder_time(_config(), now) == datetime(2026, 10, 25, 10, 0, tzinfo=UTC)

    def test_naive_now_uses_configured_timezone(self):
        config = _config(timezone="America/New_York", reminder_weekday="friday", reminder_hour=19)

        due = next_reminder_time(config, datetime(2026, 10, 14, 12, 0))

        assert due.tzinfo == ZoneInfo("America/New_York")
        assert (due.year, due.month, due.day, due.hour) == (2026, 10, 16, 19)

    def test_disabled(self):
        assert next_reminder_time(_config(reminder_enabled=False)) is None


class TestNextReminder:
    """Test reminder building."""

    def test_reminder_contents(self):
        reminder = next_reminder(_config(), datetime(2026, 10, 14, 12, 0, tzinfo=UTC))

        assert reminder.title == REMINDER_TITLE
        assert reminder.due_at == datetime(2026, 10, 18, 10, 0, tzinfo=UTC)

    def test_disabled(self):
        assert next_reminder(_config(reminder_enabled=False)) is None
