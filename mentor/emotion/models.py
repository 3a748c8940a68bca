"""Emotion profiling data models.

Defines the input snapshot, the mood enumeration and the profile produced
by the analyzer:
    usage counters -> AggregateSnapshot -> EmotionProfile
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from mentor.emotion import SAMPLE_CAPACITY


class InvalidSnapshotError(ValueError):
    """Raised when counters handed to the analyzer are malformed."""


class Mood(str, Enum):
    """Overall emotional/focus state, in classification priority order."""

    FOCUSED = "focused"
    CALM = "calm"
    FRUSTRATED = "frustrated"
    TIRED = "tired"
    RESTLESS = "restless"
    MIXED = "mixed"


class AggregateSnapshot(BaseModel):
    """Point-in-time copy of the accumulated usage counters.

    Durations are milliseconds of the measurement window. Accepts both
    snake_case names and the camelCase keys used by the extension storage.
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    productive_ms: int = Field(default=0, ge=0)
    distracting_ms: int = Field(default=0, ge=0)
    other_ms: int = Field(default=0, ge=0)
    tab_switches: int = Field(default=0, ge=0)
    typing_keystrokes: int = Field(default=0, ge=0)
    idle_ms: int = Field(default=0, ge=0)
    media_play_ms: int = Field(default=0, ge=0)
    samples: list[str] = Field(default_factory=list)

    @field_validator("samples")
    @classmethod
    def keep_recent_samples(cls, v: list[str]) -> list[str]:
        """Only the most recent samples take part in analysis."""
        return v[-SAMPLE_CAPACITY:]

    @property
    def total_active_ms(self) -> int:
        return self.productive_ms + self.distracting_ms + self.other_ms


def _describe_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"]) or "snapshot"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def parse_snapshot(data: AggregateSnapshot | Mapping[str, Any]) -> AggregateSnapshot:
    """
    Validate raw counters into an AggregateSnapshot.

    Args:
        data: Snapshot instance or mapping of counter fields

    Returns:
        Validated AggregateSnapshot

    Raises:
        InvalidSnapshotError: Wrong types, negative values or unknown fields
    """
    if isinstance(data, AggregateSnapshot):
        return data
    if not isinstance(data, Mapping):
        raise InvalidSnapshotError(
            f"Snapshot must be a mapping of counters, got {type(data).__name__}"
        )

    try:
        return AggregateSnapshot.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidSnapshotError(f"Invalid snapshot: {_describe_errors(e)}") from e


@dataclass(frozen=True)
class EmotionProfile:
    """Scored, human-readable result of one analysis run."""

    focus_score: float
    focus_pct: int
    switch_rate: float
    typing_intensity: int
    idle_ratio: float
    sentiment_avg: float
    stress: float
    mood: Mood
    summary: str
    insight: str
    action: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "focusScore": self.focus_score,
            "focusPct": self.focus_pct,
            "switchRate": self.switch_rate,
            "typingIntensity": self.typing_intensity,
            "idleRatio": self.idle_ratio,
            "sentimentAvg": self.sentiment_avg,
            "stress": self.stress,
            "mood": self.mood.value,
            "summary": self.summary,
            "insight": self.insight,
            "action": self.action,
        }
