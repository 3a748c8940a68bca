"""
Tool: Reminder Queue
Purpose: Schedule reminder intents without spamming the user

The reminder policy is stateless: every recompute can produce the same
"you've been idle" intent again. This queue remembers what was issued and
drops a repeat of the same reminder type inside that type's dedupe window.

Lifecycle:
- pending: scheduled, due after the intent's urgency delay
- delivered: handed to the notifier, auto-expiring reminders end here
- awaiting_action: delivered but kept until the user dismisses or snoozes
- dismissed: user closed it
- suppressed: duplicate inside the dedupe window, recorded for stats only

Usage:
    python mentor/automation/reminder_queue.py --action schedule \\
        --intents '[{"type": "idle", "message": "Stretch?", "urgencyDelayMs": 60000, "dedupeWindowMs": 300000}]'
    python mentor/automation/reminder_queue.py --action list --status pending
    python mentor/automation/reminder_queue.py --action active
    python mentor/automation/reminder_queue.py --action due
    python mentor/automation/reminder_queue.py --action snooze --id <reminder_id>
    python mentor/automation/reminder_queue.py --action dismiss --id <reminder_id>

Dependencies:
    - sqlite3 (stdlib)
    - pyyaml (snooze length in args/emotion.yaml)

Output:
    JSON result with success status and data
"""

import argparse
import json
import sqlite3
import sys
import uuid
from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any


# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mentor.automation import DB_PATH
from mentor.automation.models import ReminderIntent, ReminderType
from mentor.emotion.config_models import load_config
from mentor.logging_config import get_logger, setup_logging


logger = get_logger(__name__)

VALID_STATUSES = ["pending", "delivered", "awaiting_action", "dismissed", "suppressed"]
ACTIVE_STATUSES = ["pending", "awaiting_action"]


def get_connection() -> sqlite3.Connection:
    """Get database connection, creating tables if needed."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row

    try:
        _create_schema(conn.cursor())
        conn.commit()
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def _create_schema(cursor: sqlite3.Cursor) -> None:
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS reminders (
            id TEXT PRIMARY KEY,
            type TEXT CHECK(type IN ('idle', 'focus', 'stress', 'media')) NOT NULL,
            title TEXT,
            message TEXT NOT NULL,
            status TEXT CHECK(status IN ('pending', 'delivered', 'awaiting_action', 'dismissed', 'suppressed'))
                DEFAULT 'pending',
            keep_until_action INTEGER DEFAULT 0,
            dedupe_window_ms INTEGER DEFAULT 0,
            created_at DATETIME NOT NULL,
            due_at DATETIME NOT NULL,
            delivered_at DATETIME,
            snoozed_count INTEGER DEFAULT 0
        )
    """)

    cursor.execute("CREATE INDEX IF NOT EXISTS idx_reminders_status ON reminders(status)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_reminders_type ON reminders(type, created_at)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_reminders_due ON reminders(due_at)")


def row_to_dict(row) -> dict | None:
    """Convert sqlite3.Row to dictionary."""
    if row is None:
        return None
    data = dict(row)
    data["keep_until_action"] = bool(data["keep_until_action"])
    return data


def _last_issued(cursor: sqlite3.Cursor, kind: str, since: datetime) -> dict | None:
    cursor.execute(
        """
        SELECT * FROM reminders
        WHERE type = ? AND status != 'suppressed' AND created_at > ?
        ORDER BY created_at DESC LIMIT 1
    """,
        (kind, since.isoformat()),
    )
    return row_to_dict(cursor.fetchone())


def schedule_intents(intents: Iterable[ReminderIntent], now: datetime | None = None) -> dict[str, Any]:
    """
    Queue reminder intents, suppressing repeats inside their dedupe window.

    Args:
        intents: Intents from the reminder policy
        now: Reference time (defaults to now)

    Returns:
        dict with the scheduled reminder records and the suppressed types
    """
    now = now or datetime.now()

    scheduled = []
    suppressed = []

    conn = get_connection()
    try:
        cursor = conn.cursor()

        for intent in intents:
            window_start = now - timedelta(milliseconds=intent.dedupe_window_ms)
            previous = _last_issued(cursor, intent.type.value, window_start)

            reminder_id = str(uuid.uuid4())
            due_at = now + timedelta(milliseconds=intent.urgency_delay_ms)
            status = "suppressed" if previous else "pending"

            cursor.execute(
                """
                INSERT INTO reminders (id, type, title, message, status, keep_until_action,
                                       dedupe_window_ms, created_at, due_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    reminder_id,
                    intent.type.value,
                    intent.title,
                    intent.message,
                    status,
                    1 if intent.keep_until_action else 0,
                    intent.dedupe_window_ms,
                    now.isoformat(),
                    due_at.isoformat(),
                ),
            )

            if previous:
                logger.info(
                    "reminder suppressed",
                    type=intent.type.value,
                    previous_id=previous["id"],
                    window_ms=intent.dedupe_window_ms,
                )
                suppressed.append(intent.type.value)
            else:
                scheduled.append({
                    "id": reminder_id,
                    "type": intent.type.value,
                    "due_at": due_at.isoformat(),
                    "keep_until_action": intent.keep_until_action,
                })

        # One commit per batch: a failed insert leaves the queue untouched
        conn.commit()
    finally:
        conn.close()

    return {
        "success": True,
        "scheduled": scheduled,
        "suppressed": suppressed,
        "message": f"{len(scheduled)} scheduled, {len(suppressed)} suppressed",
    }


def get_reminder(reminder_id: str) -> dict[str, Any] | None:
    """Get a reminder by ID."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM reminders WHERE id = ?", (reminder_id,))
        return row_to_dict(cursor.fetchone())
    finally:
        conn.close()


def list_reminders(status: str | None = None, limit: int = 50) -> list[dict[str, Any]]:
    """List reminders, newest first, optionally filtered by status."""
    if status and status not in VALID_STATUSES:
        raise ValueError(f"Invalid status: {status}. Must be one of {VALID_STATUSES}")

    query = "SELECT * FROM reminders WHERE 1=1"
    params: list[Any] = []

    if status:
        query += " AND status = ?"
        params.append(status)

    query += " ORDER BY created_at DESC LIMIT ?"
    params.append(limit)

    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(query, params)
        return [row_to_dict(row) for row in cursor.fetchall()]
    finally:
        conn.close()


def active_reminders() -> list[dict[str, Any]]:
    """Pending and awaiting-action reminders, soonest due first."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT * FROM reminders
            WHERE status IN ('pending', 'awaiting_action')
            ORDER BY due_at ASC
        """
        )
        return [row_to_dict(row) for row in cursor.fetchall()]
    finally:
        conn.close()


def deliver_due(now: datetime | None = None) -> dict[str, Any]:
    """
    Hand out pending reminders whose due time has passed.

    Auto-expiring reminders are marked delivered. Keep-until-action reminders
    move to awaiting_action and stay active until dismissed or snoozed.

    Returns:
        dict with the delivered reminder records
    """
    now = now or datetime.now()

    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT * FROM reminders
            WHERE status = 'pending' AND due_at <= ?
            ORDER BY due_at ASC
        """,
            (now.isoformat(),),
        )
        rows = [row_to_dict(row) for row in cursor.fetchall()]

        for reminder in rows:
            new_status = "awaiting_action" if reminder["keep_until_action"] else "delivered"
            cursor.execute(
                "UPDATE reminders SET status = ?, delivered_at = ? WHERE id = ?",
                (new_status, now.isoformat(), reminder["id"]),
            )
            reminder["status"] = new_status
            reminder["delivered_at"] = now.isoformat()

        conn.commit()
    finally:
        conn.close()

    return {"success": True, "delivered": rows, "count": len(rows)}


def snooze_reminder(
    reminder_id: str,
    minutes: int | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Push an active reminder back by `minutes` (config snooze length by default).

    Returns:
        dict with success status and the new due time
    """
    if minutes is None:
        minutes = load_config().reminders.snooze_minutes
    if minutes <= 0:
        return {"success": False, "error": f"Snooze minutes must be positive, got {minutes}"}

    now = now or datetime.now()
    reminder = get_reminder(reminder_id)
    if not reminder:
        return {"success": False, "error": f"Reminder '{reminder_id}' not found"}
    if reminder["status"] not in ACTIVE_STATUSES:
        return {
            "success": False,
            "error": f"Reminder '{reminder_id}' is {reminder['status']}, only active reminders can be snoozed",
        }

    due_at = now + timedelta(minutes=minutes)

    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            UPDATE reminders
            SET status = 'pending', due_at = ?, snoozed_count = snoozed_count + 1
            WHERE id = ?
        """,
            (due_at.isoformat(), reminder_id),
        )
        conn.commit()
    finally:
        conn.close()

    return {"success": True, "reminder_id": reminder_id, "due_at": due_at.isoformat()}


def dismiss_reminder(reminder_id: str) -> dict[str, Any]:
    """Close a reminder for good."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(
            "UPDATE reminders SET status = 'dismissed' WHERE id = ? AND status != 'suppressed'",
            (reminder_id,),
        )
        if cursor.rowcount == 0:
            return {"success": False, "error": f"Reminder '{reminder_id}' not found"}
        conn.commit()
    finally:
        conn.close()

    return {"success": True, "reminder_id": reminder_id}


def get_stats() -> dict[str, Any]:
    """Reminder counts by type and status."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT type, status, COUNT(*) AS count FROM reminders GROUP BY type, status")
        rows = cursor.fetchall()
    finally:
        conn.close()

    by_type: dict[str, dict[str, int]] = {}
    for row in rows:
        by_type.setdefault(row["type"], {})[row["status"]] = row["count"]

    return {"success": True, "by_type": by_type}


def intent_from_dict(data: dict[str, Any]) -> ReminderIntent:
    """Build an intent from its camelCase record (as emitted by to_dict)."""
    return ReminderIntent(
        type=ReminderType(data["type"]),
        title=data.get("title", ""),
        message=data["message"],
        urgency_delay_ms=int(data.get("urgencyDelayMs", 0)),
        dedupe_window_ms=int(data.get("dedupeWindowMs", 0)),
        keep_until_action=bool(data.get("keepUntilAction", False)),
    )


def main():
    setup_logging()

    parser = argparse.ArgumentParser(description="Reminder Queue")
    parser.add_argument(
        "--action",
        required=True,
        choices=["schedule", "list", "active", "due", "snooze", "dismiss", "stats"],
        help="Action to perform",
    )
    parser.add_argument("--intents", help="JSON list of reminder intents")
    parser.add_argument("--id", help="Reminder ID")
    parser.add_argument("--status", help="Filter by status")
    parser.add_argument("--minutes", type=int, help="Snooze length in minutes")
    parser.add_argument("--limit", type=int, default=50, help="Result limit")

    args = parser.parse_args()
    result = None

    if args.action == "schedule":
        if not args.intents:
            print(json.dumps({"success": False, "error": "--intents required for schedule"}))
            sys.exit(1)
        try:
            intents = [intent_from_dict(d) for d in json.loads(args.intents)]
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            print(json.dumps({"success": False, "error": f"Invalid intents: {e}"}))
            sys.exit(1)
        result = schedule_intents(intents)

    elif args.action == "list":
        try:
            reminders = list_reminders(status=args.status, limit=args.limit)
        except ValueError as e:
            print(json.dumps({"success": False, "error": str(e)}))
            sys.exit(1)
        result = {"success": True, "reminders": reminders, "count": len(reminders)}

    elif args.action == "active":
        reminders = active_reminders()
        result = {"success": True, "reminders": reminders, "count": len(reminders)}

    elif args.action == "due":
        result = deliver_due()

    elif args.action in ("snooze", "dismiss"):
        if not args.id:
            print(json.dumps({"success": False, "error": f"--id required for {args.action}"}))
            sys.exit(1)
        if args.action == "snooze":
            result = snooze_reminder(args.id, args.minutes)
        else:
            result = dismiss_reminder(args.id)

    elif args.action == "stats":
        result = get_stats()

    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
