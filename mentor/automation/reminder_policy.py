"""
Reminder policy: decides which reminders a fresh emotion profile warrants.

Usage:
    from mentor.automation.reminder_policy import ReminderPolicy

    policy = ReminderPolicy()
    intents = policy.evaluate(profile, media_play_ms=usage["mediaPlayMs"])
    for intent in intents:
        print(intent.type, intent.urgency_delay_ms)
"""

from __future__ import annotations

from mentor.automation.models import ReminderIntent, ReminderType
from mentor.emotion.config_models import ReminderConfig, ReminderRuleConfig
from mentor.emotion.models import EmotionProfile, InvalidSnapshotError
from mentor.logging_config import get_logger


logger = get_logger(__name__)

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60_000


def _intent(kind: ReminderType, rule: ReminderRuleConfig) -> ReminderIntent:
    return ReminderIntent(
        type=kind,
        title=rule.title,
        message=rule.message,
        urgency_delay_ms=rule.delay_seconds * MS_PER_SECOND,
        dedupe_window_ms=rule.dedupe_minutes * MS_PER_MINUTE,
        keep_until_action=rule.keep_until_action,
    )


class ReminderPolicy:
    def __init__(self, config: ReminderConfig | None = None):
        self._config = config or ReminderConfig()

    def evaluate(self, profile: EmotionProfile, media_play_ms: int = 0) -> list[ReminderIntent]:
        if isinstance(media_play_ms, bool) or not isinstance(media_play_ms, int):
            raise InvalidSnapshotError(
                f"media_play_ms must be an integer, got {type(media_play_ms).__name__}"
            )
        if media_play_ms < 0:
            raise InvalidSnapshotError(f"media_play_ms must be non-negative, got {media_play_ms}")

        rules = self._config
        intents: list[ReminderIntent] = []

        if rules.idle.enabled and profile.idle_ratio > rules.idle.threshold:
            intents.append(_intent(ReminderType.IDLE, rules.idle))

        if rules.focus.enabled and profile.focus_pct < rules.focus.threshold:
            intents.append(_intent(ReminderType.FOCUS, rules.focus))

        if rules.stress.enabled and profile.stress >= rules.stress.threshold:
            intents.append(_intent(ReminderType.STRESS, rules.stress))

        media_minutes = media_play_ms / MS_PER_MINUTE
        if rules.media.enabled and media_minutes >= rules.media.threshold:
            intents.append(_intent(ReminderType.MEDIA, rules.media))

        if intents:
            logger.debug("reminder conditions met", types=[i.type.value for i in intents])
        return intents


def evaluate_reminders(
    profile: EmotionProfile,
    media_play_ms: int = 0,
    config: ReminderConfig | None = None,
) -> list[ReminderIntent]:
    return ReminderPolicy(config).evaluate(profile, media_play_ms)
