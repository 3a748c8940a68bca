"""
Mood -> insight and action text.

Each mood maps to one canned insight/action pair. Calm and mixed have no
fixed pair: they land in the catch-all branch, which looks at text tone and
focus percentage so the catch-all still says something specific.

Wording is kept forward-facing: suggestions, never blame.
"""

from __future__ import annotations

from mentor.emotion.config_models import InsightConfig
from mentor.emotion.models import Mood
from mentor.emotion.rounding import round_half_up


FIXED_MESSAGES: dict[Mood, tuple[str, str]] = {
    Mood.FRUSTRATED: (
        "High switching and negative tone detected (stress {stress_pct}%).",
        "Take a 3-minute break. Then try a 25-min Pomodoro.",
    ),
    Mood.RESTLESS: (
        "Frequent context switches (~{switch_rate}/min).",
        "Enable Focus Mode for 25 minutes and close distracting tabs.",
    ),
    Mood.TIRED: (
        "High idle time suggests fatigue.",
        "Take a longer break (10-20 min) and hydrate.",
    ),
    Mood.FOCUSED: (
        "Steady productive time detected, good momentum.",
        "Keep this rhythm: 25/5 Pomodoro.",
    ),
}

NEGATIVE_TONE_MESSAGE = (
    "Text tone leans negative, possible frustration.",
    "Write a 2-sentence summary of the blocker; ask a quick sync.",
)
LOW_FOCUS_MESSAGE = (
    "Low focus detected (<{low_focus_pct}%).",
    "Try a short 5-min break and then a 25-min focus session.",
)
MODERATE_MESSAGE = (
    "Mixed signals: moderate focus with occasional switches.",
    "Schedule deep work into your peak hours.",
)

SUMMARY_TEMPLATE = "Focus: {focus_pct}%, mood: {mood}."


def summarize(focus_pct: int, mood: Mood) -> str:
    return SUMMARY_TEMPLATE.format(focus_pct=focus_pct, mood=mood.value)


def compose(
    mood: Mood,
    focus_pct: int,
    stress: float,
    switch_rate: float,
    sentiment_avg: float,
    config: InsightConfig | None = None,
) -> tuple[str, str]:
    """
    Pick the insight and action text for a classified profile.

    Args:
        mood: Classified mood
        focus_pct: Focus percentage (0-100)
        stress: Unrounded stress score
        switch_rate: Unrounded tab switches per minute
        sentiment_avg: Unrounded mean sample sentiment
        config: Thresholds for the catch-all branch

    Returns:
        (insight, action)
    """
    config = config or InsightConfig()

    if mood in FIXED_MESSAGES:
        insight, action = FIXED_MESSAGES[mood]
        values = {
            "stress_pct": round_half_up(stress * 100),
            "switch_rate": f"{round_half_up(switch_rate, 1):.1f}",
        }
        return insight.format(**values), action

    # Catch-all: calm and mixed
    if sentiment_avg < config.negative_sentiment:
        return NEGATIVE_TONE_MESSAGE
    if focus_pct < config.low_focus_pct:
        insight, action = LOW_FOCUS_MESSAGE
        return insight.format(low_focus_pct=config.low_focus_pct), action
    return MODERATE_MESSAGE
