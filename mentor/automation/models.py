"""Reminder data models.

    EmotionProfile -> ReminderIntent -> queued reminder
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ReminderType(str, Enum):
    """Conditions that can trigger a reminder."""

    IDLE = "idle"
    FOCUS = "focus"
    STRESS = "stress"
    MEDIA = "media"


@dataclass(frozen=True)
class ReminderIntent:
    """A reminder the policy thinks is warranted, not yet delivered.

    The scheduler must drop a new intent if one of the same type was issued
    less than `dedupe_window_ms` ago. Intents with `keep_until_action` stay
    pending until the user dismisses or snoozes them.
    """

    type: ReminderType
    title: str
    message: str
    urgency_delay_ms: int
    dedupe_window_ms: int
    keep_until_action: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "urgencyDelayMs": self.urgency_delay_ms,
            "dedupeWindowMs": self.dedupe_window_ms,
            "keepUntilAction": self.keep_until_action,
        }
