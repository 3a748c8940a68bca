"""Tests for mentor/automation/reminder_queue.py

Tests cover:
- Scheduling with per-type dedupe windows
- Delivery of due reminders (auto-expire vs keep-until-action)
- Snooze and dismiss lifecycle
- Listing and stats
- Connection cleanup when a statement fails
"""

import sqlite3
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest

from mentor.automation.models import ReminderIntent, ReminderType


@pytest.fixture
def queue(temp_db):
    """Reminder queue module bound to a temporary database."""
    with patch("mentor.automation.reminder_queue.DB_PATH", temp_db), \
         patch("mentor.automation.DB_PATH", temp_db):
        from mentor.automation import reminder_queue
        yield reminder_queue


def idle_intent() -> ReminderIntent:
    return ReminderIntent(
        type=ReminderType.IDLE,
        title="Still there?",
        message="Stretch?",
        urgency_delay_ms=60_000,
        dedupe_window_ms=5 * 60_000,
    )


def stress_intent() -> ReminderIntent:
    return ReminderIntent(
        type=ReminderType.STRESS,
        title="Breather",
        message="Take a break.",
        urgency_delay_ms=30_000,
        dedupe_window_ms=5 * 60_000,
        keep_until_action=True,
    )


class TestScheduleIntents:
    """Tests for schedule_intents()."""

    def test_schedules_pending_reminder(self, queue, fixed_now):
        result = queue.schedule_intents([idle_intent()], now=fixed_now)

        assert result["success"] is True
        assert len(result["scheduled"]) == 1
        assert result["suppressed"] == []

        scheduled = result["scheduled"][0]
        assert scheduled["type"] == "idle"
        assert scheduled["due_at"] == (fixed_now + timedelta(minutes=1)).isoformat()

        reminder = queue.get_reminder(scheduled["id"])
        assert reminder["status"] == "pending"
        assert reminder["keep_until_action"] is False

    def test_repeat_inside_window_is_suppressed(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        result = queue.schedule_intents([idle_intent()], now=fixed_now + timedelta(minutes=1))

        assert result["scheduled"] == []
        assert result["suppressed"] == ["idle"]
        assert len(queue.list_reminders(status="suppressed")) == 1

    def test_repeat_after_window_is_scheduled(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        result = queue.schedule_intents([idle_intent()], now=fixed_now + timedelta(minutes=6))

        assert len(result["scheduled"]) == 1
        assert result["suppressed"] == []

    def test_suppressed_rows_do_not_extend_window(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        queue.schedule_intents([idle_intent()], now=fixed_now + timedelta(minutes=4))
        result = queue.schedule_intents([idle_intent()], now=fixed_now + timedelta(minutes=6))

        assert len(result["scheduled"]) == 1

    def test_types_are_deduped_independently(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        result = queue.schedule_intents([stress_intent()], now=fixed_now)

        assert [s["type"] for s in result["scheduled"]] == ["stress"]
        assert result["scheduled"][0]["keep_until_action"] is True


class TestDeliverDue:
    """Tests for deliver_due()."""

    def test_nothing_due_yet(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        result = queue.deliver_due(now=fixed_now + timedelta(seconds=30))

        assert result["count"] == 0

    def test_auto_expiring_reminder_is_delivered(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        result = queue.deliver_due(now=fixed_now + timedelta(minutes=2))

        assert result["count"] == 1
        assert result["delivered"][0]["status"] == "delivered"
        assert queue.active_reminders() == []

    def test_keep_until_action_stays_active(self, queue, fixed_now):
        queue.schedule_intents([stress_intent()], now=fixed_now)
        result = queue.deliver_due(now=fixed_now + timedelta(minutes=1))

        assert result["delivered"][0]["status"] == "awaiting_action"
        active = queue.active_reminders()
        assert len(active) == 1
        assert active[0]["status"] == "awaiting_action"

    def test_delivered_only_once(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        queue.deliver_due(now=fixed_now + timedelta(minutes=2))

        assert queue.deliver_due(now=fixed_now + timedelta(minutes=3))["count"] == 0


class TestSnoozeAndDismiss:
    """Tests for snooze_reminder() and dismiss_reminder()."""

    def test_snooze_awaiting_reminder(self, queue, fixed_now):
        scheduled = queue.schedule_intents([stress_intent()], now=fixed_now)["scheduled"][0]
        queue.deliver_due(now=fixed_now + timedelta(minutes=1))

        later = fixed_now + timedelta(minutes=2)
        result = queue.snooze_reminder(scheduled["id"], minutes=10, now=later)

        assert result["success"] is True
        assert result["due_at"] == (later + timedelta(minutes=10)).isoformat()

        reminder = queue.get_reminder(scheduled["id"])
        assert reminder["status"] == "pending"
        assert reminder["snoozed_count"] == 1

    def test_snooze_uses_configured_length(self, queue, fixed_now):
        scheduled = queue.schedule_intents([idle_intent()], now=fixed_now)["scheduled"][0]
        result = queue.snooze_reminder(scheduled["id"], now=fixed_now)

        assert result["due_at"] == (fixed_now + timedelta(minutes=5)).isoformat()

    def test_snooze_length_read_from_emotion_config(self, queue, fixed_now, tmp_path):
        config_path = tmp_path / "emotion.yaml"
        config_path.write_text("reminders:\n  snooze_minutes: 15\n")
        scheduled = queue.schedule_intents([idle_intent()], now=fixed_now)["scheduled"][0]

        with patch("mentor.emotion.config_models.CONFIG_PATH", config_path):
            result = queue.snooze_reminder(scheduled["id"], now=fixed_now)

        assert result["due_at"] == (fixed_now + timedelta(minutes=15)).isoformat()

    def test_snooze_rejects_non_positive_minutes(self, queue, fixed_now):
        scheduled = queue.schedule_intents([idle_intent()], now=fixed_now)["scheduled"][0]
        result = queue.snooze_reminder(scheduled["id"], minutes=0)

        assert result["success"] is False
        assert "positive" in result["error"]

    def test_snooze_unknown_reminder(self, queue):
        result = queue.snooze_reminder("nonexistent-id", minutes=5)

        assert result["success"] is False
        assert "not found" in result["error"]

    def test_snooze_delivered_reminder_fails(self, queue, fixed_now):
        scheduled = queue.schedule_intents([idle_intent()], now=fixed_now)["scheduled"][0]
        queue.deliver_due(now=fixed_now + timedelta(minutes=2))

        result = queue.snooze_reminder(scheduled["id"], minutes=5)
        assert result["success"] is False
        assert "delivered" in result["error"]

    def test_dismiss(self, queue, fixed_now):
        scheduled = queue.schedule_intents([stress_intent()], now=fixed_now)["scheduled"][0]
        queue.deliver_due(now=fixed_now + timedelta(minutes=1))

        result = queue.dismiss_reminder(scheduled["id"])

        assert result["success"] is True
        assert queue.get_reminder(scheduled["id"])["status"] == "dismissed"
        assert queue.active_reminders() == []

    def test_dismiss_unknown_reminder(self, queue):
        result = queue.dismiss_reminder("nonexistent-id")

        assert result["success"] is False
        assert "not found" in result["error"]


class TestListingAndStats:
    def test_list_rejects_unknown_status(self, queue):
        with pytest.raises(ValueError, match="Invalid status"):
            queue.list_reminders(status="archived")

    def test_list_newest_first(self, queue, fixed_now):
        queue.schedule_intents([idle_intent()], now=fixed_now)
        queue.schedule_intents([stress_intent()], now=fixed_now + timedelta(minutes=1))

        reminders = queue.list_reminders()
        assert [r["type"] for r in reminders] == ["stress", "idle"]

    def test_stats(self, queue, fixed_now):
        queue.schedule_intents([idle_intent(), stress_intent()], now=fixed_now)
        queue.schedule_intents([idle_intent()], now=fixed_now + timedelta(minutes=1))

        stats = queue.get_stats()

        assert stats["by_type"]["idle"] == {"pending": 1, "suppressed": 1}
        assert stats["by_type"]["stress"] == {"pending": 1}


class TestIntentFromDict:
    def test_reads_policy_output(self):
        from mentor.automation.reminder_queue import intent_from_dict

        intent = stress_intent()
        assert intent_from_dict(intent.to_dict()) == intent

    def test_unknown_type_raises(self):
        from mentor.automation.reminder_queue import intent_from_dict

        with pytest.raises(ValueError):
            intent_from_dict({"type": "hydrate", "message": "Drink water"})


class TestConnectionCleanup:
    """Connections are closed and nothing is committed when a statement fails."""

    @pytest.fixture
    def failing_conn(self):
        conn = MagicMock()
        conn.cursor.return_value.execute.side_effect = sqlite3.OperationalError("disk I/O error")
        with patch("mentor.automation.reminder_queue.get_connection", return_value=conn):
            yield conn

    def test_schedule_intents(self, failing_conn, fixed_now):
        from mentor.automation import reminder_queue

        with pytest.raises(sqlite3.OperationalError):
            reminder_queue.schedule_intents([idle_intent()], now=fixed_now)

        failing_conn.close.assert_called_once()
        failing_conn.commit.assert_not_called()

    @pytest.mark.parametrize(
        "call",
        [
            lambda q: q.deliver_due(),
            lambda q: q.list_reminders(),
            lambda q: q.active_reminders(),
            lambda q: q.get_reminder("some-id"),
            lambda q: q.dismiss_reminder("some-id"),
            lambda q: q.get_stats(),
        ],
        ids=["deliver_due", "list_reminders", "active_reminders", "get_reminder", "dismiss", "stats"],
    )
    def test_other_operations(self, failing_conn, call):
        from mentor.automation import reminder_queue

        with pytest.raises(sqlite3.OperationalError):
            call(reminder_queue)

        failing_conn.close.assert_called_once()
        failing_conn.commit.assert_not_called()

    def test_failed_schema_setup_closes_connection(self, temp_db):
        from mentor.automation import reminder_queue

        conn = MagicMock()
        conn.cursor.return_value.execute.side_effect = sqlite3.OperationalError("locked")
        with patch("mentor.automation.reminder_queue.DB_PATH", temp_db), \
             patch("mentor.automation.reminder_queue.sqlite3.connect", return_value=conn):
            with pytest.raises(sqlite3.OperationalError):
                reminder_queue.get_connection()

        conn.close.assert_called_once()
