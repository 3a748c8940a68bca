"""Tests for mentor/emotion/models.py"""

import pytest
from pydantic import ValidationError

from mentor.emotion.models import (
    AggregateSnapshot,
    EmotionProfile,
    InvalidSnapshotError,
    Mood,
    parse_snapshot,
)


class TestAggregateSnapshot:
    """Tests for AggregateSnapshot validation."""

    def test_defaults(self):
        snapshot = AggregateSnapshot()

        assert snapshot.productive_ms == 0
        assert snapshot.samples == []
        assert snapshot.total_active_ms == 0

    def test_camel_and_snake_names(self):
        by_alias = AggregateSnapshot.model_validate({"productiveMs": 5, "tabSwitches": 2})
        by_name = AggregateSnapshot.model_validate({"productive_ms": 5, "tab_switches": 2})

        assert by_alias == by_name

    def test_total_active_excludes_idle(self):
        snapshot = AggregateSnapshot(productive_ms=1, distracting_ms=2, other_ms=3, idle_ms=100)
        assert snapshot.total_active_ms == 6

    def test_keeps_last_ten_samples(self):
        snapshot = AggregateSnapshot(samples=[str(i) for i in range(15)])
        assert snapshot.samples == [str(i) for i in range(5, 15)]

    def test_frozen(self):
        snapshot = AggregateSnapshot()
        with pytest.raises(ValidationError):
            snapshot.productive_ms = 10

    def test_dump_uses_storage_keys(self):
        data = AggregateSnapshot(idle_ms=3).model_dump(by_alias=True)
        assert data["idleMs"] == 3
        assert "mediaPlayMs" in data


class TestParseSnapshot:
    """Tests for parse_snapshot()."""

    def test_returns_instance_unchanged(self):
        snapshot = AggregateSnapshot(other_ms=1)
        assert parse_snapshot(snapshot) is snapshot

    def test_wraps_validation_errors(self):
        with pytest.raises(InvalidSnapshotError) as exc_info:
            parse_snapshot({"typingKeystrokes": -3})

        assert "typingKeystrokes" in str(exc_info.value)
        assert isinstance(exc_info.value, ValueError)

    def test_rejects_none(self):
        with pytest.raises(InvalidSnapshotError):
            parse_snapshot(None)


class TestMood:
    def test_values_are_strings(self):
        assert Mood.FOCUSED == "focused"
        assert [m.value for m in Mood] == [
            "focused",
            "calm",
            "frustrated",
            "tired",
            "restless",
            "mixed",
        ]


class TestEmotionProfile:
    def test_to_dict(self):
        profile = EmotionProfile(
            focus_score=0.5,
            focus_pct=50,
            switch_rate=1.0,
            typing_intensity=10,
            idle_ratio=0.1,
            sentiment_avg=0.0,
            stress=0.1,
            mood=Mood.CALM,
            summary="Focus: 50%, mood: calm.",
            insight="i",
            action="a",
        )

        data = profile.to_dict()
        assert data["mood"] == "calm"
        assert data["typingIntensity"] == 10
        assert data["sentimentAvg"] == 0.0
