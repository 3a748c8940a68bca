from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from mentor.emotion import CONFIG_PATH
from mentor.emotion.sentiment import DEFAULT_LEXICON

logger = logging.getLogger(__name__)


# =============================================================================
# AnalyzerConfig (args/emotion.yaml -> analyzer)
# =============================================================================

class LexiconEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")
    stem: str = Field(min_length=1)
    weight: float


class MoodThresholdsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    focused_min_focus: float = Field(default=0.7, ge=0.0, le=1.0)
    focused_max_stress: float = Field(default=0.2, ge=0.0, le=1.0)
    calm_min_focus: float = Field(default=0.5, ge=0.0, le=1.0)
    calm_max_stress: float = Field(default=0.4, ge=0.0, le=1.0)
    frustrated_min_stress: float = Field(default=0.6, ge=0.0, le=1.0)
    tired_min_idle: float = Field(default=0.5, ge=0.0, le=1.0)
    restless_min_switch_rate: float = Field(default=1.5, ge=0.0)


class StressConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    switch_baseline: float = Field(default=0.5, ge=0.0)
    switch_scale: float = Field(default=5.0, gt=0.0)
    typing_threshold: float = Field(default=120.0, ge=0.0)
    typing_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    sentiment_threshold: float = Field(default=-0.2)
    sentiment_weight: float = Field(default=0.25, ge=0.0, le=1.0)
    idle_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    idle_weight: float = Field(default=0.15, ge=0.0, le=1.0)


class InsightConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    negative_sentiment: float = Field(default=-0.2)
    low_focus_pct: int = Field(default=40, ge=0, le=100)


class AnalyzerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    active_minutes_floor: float = Field(default=0.1, gt=0.0)
    thresholds: MoodThresholdsConfig = Field(default_factory=MoodThresholdsConfig)
    stress: StressConfig = Field(default_factory=StressConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)
    lexicon: list[LexiconEntry] = Field(
        default_factory=lambda: [LexiconEntry(stem=s, weight=w) for s, w in DEFAULT_LEXICON]
    )

    def lexicon_pairs(self) -> tuple[tuple[str, float], ...]:
        """Lexicon as ordered (stem, weight) pairs, declaration order kept."""
        return tuple((entry.stem, entry.weight) for entry in self.lexicon)


# =============================================================================
# DomainConfig (args/emotion.yaml -> domains)
# =============================================================================

class DomainConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    productive: list[str] = Field(default_factory=lambda: [
        "github.com",
        "stackoverflow.com",
        "gitlab.com",
        "docs.google.com",
        "notion.so",
        "jira",
        "trello.com",
    ])
    distracting: list[str] = Field(default_factory=lambda: [
        "youtube.com",
        "facebook.com",
        "twitter.com",
        "instagram.com",
        "tiktok.com",
        "reddit.com",
    ])

    @field_validator("productive", "distracting")
    @classmethod
    def lowercase_domains(cls, v: list[str]) -> list[str]:
        """Domains are matched against lowercased hostnames."""
        return [d.strip().lower() for d in v if d.strip()]


# =============================================================================
# ReminderConfig (args/emotion.yaml -> reminders)
# =============================================================================

class ReminderRuleConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    enabled: bool = Field(default=True)
    threshold: float = Field(default=0.0)
    delay_seconds: int = Field(default=60, ge=0)
    dedupe_minutes: int = Field(default=5, ge=0)
    keep_until_action: bool = Field(default=False)
    title: str = Field(default="")
    message: str = Field(default="")


def _idle_rule() -> ReminderRuleConfig:
    return ReminderRuleConfig(
        threshold=0.5,
        delay_seconds=60,
        dedupe_minutes=5,
        title="Still there?",
        message="You've been idle a while. Stretch, grab some water, then pick one small next step.",
    )


def _focus_rule() -> ReminderRuleConfig:
    return ReminderRuleConfig(
        threshold=40,
        delay_seconds=120,
        dedupe_minutes=10,
        title="Focus check",
        message="Focus has dipped below 40%. Close a distracting tab and try a 25-minute session.",
    )


def _stress_rule() -> ReminderRuleConfig:
    return ReminderRuleConfig(
        threshold=0.6,
        delay_seconds=30,
        dedupe_minutes=5,
        keep_until_action=True,
        title="Time for a breather",
        message="Stress signals are high. Take a 3-minute break before the next task.",
    )


def _media_rule() -> ReminderRuleConfig:
    return ReminderRuleConfig(
        threshold=30,
        delay_seconds=90,
        dedupe_minutes=30,
        title="Media break check",
        message="You've watched or listened for 30+ minutes. Ready to get back to it?",
    )


class ReminderConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    idle: ReminderRuleConfig = Field(default_factory=_idle_rule)
    focus: ReminderRuleConfig = Field(default_factory=_focus_rule)
    stress: ReminderRuleConfig = Field(default_factory=_stress_rule)
    media: ReminderRuleConfig = Field(default_factory=_media_rule)
    snooze_minutes: int = Field(default=5, ge=1)


# =============================================================================
# EmotionConfig (args/emotion.yaml)
# =============================================================================

class EmotionConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    domains: DomainConfig = Field(default_factory=DomainConfig)
    reminders: ReminderConfig = Field(default_factory=ReminderConfig)


def load_config(path: Path | None = None) -> EmotionConfig:
    yaml_path = path or CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return EmotionConfig.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {yaml_path}: {e}, using defaults")
        return EmotionConfig()
