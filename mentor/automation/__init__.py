"""
Automation Tools - Proactive reminders from the emotion profile

This package turns a scored emotion profile into reminders without the user
asking for them, and keeps those reminders from turning into nagging.

Components:
    reminder_policy.py: Profile -> reminder intents (idle, focus, stress, media)
        - Stateless, every rule evaluated independently
        - Each intent carries its own urgency delay and dedupe window
    reminder_queue.py: Intent scheduling with de-duplication
        - Suppresses a repeat of the same reminder type inside its window
        - Snooze and dismiss for reminders that wait for the user
    models.py: Reminder types and the intent record

Usage:
    from mentor.automation import reminder_policy, reminder_queue
    intents = reminder_policy.evaluate_reminders(profile, media_play_ms=0)
    reminder_queue.schedule_intents(intents)

Dependencies:
    - sqlite3 (stdlib)
    - pyyaml (snooze length, via mentor.emotion config)
"""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = PROJECT_ROOT / 'data' / 'reminders.db'

__all__ = [
    'PROJECT_ROOT',
    'DB_PATH',
]
