"""
Tool: Aggregate Analyzer
Purpose: Turn accumulated usage counters into an emotion/focus profile

The extension counts, it does not judge. This tool does the judging:
five metrics are derived from one snapshot of counters, folded into a
stress score, and classified into a single mood with a suggestion the
popup can show.

Metrics:
- focus_score: productive share of active time
- switch_rate: tab switches per active minute
- typing_intensity: keystrokes per active minute
- idle_ratio: idle share of idle + active time
- sentiment_avg: mean polarity of opted-in text samples

Stress is additive (excess switching, heavy typing, negative tone, long
idle), clamped to [0, 1]. Mood rules are checked in order and the first
match wins: focused, calm, frustrated, tired, restless, else mixed.

Usage:
    python mentor/emotion/analyzer.py --action analyze \\
        --snapshot '{"productiveMs": 3600000, "tabSwitches": 12}'

    python mentor/emotion/analyzer.py --action analyze --snapshot-file usage.json

    python mentor/emotion/analyzer.py --action metrics \\
        --snapshot '{"distractingMs": 600000, "tabSwitches": 40}'

Dependencies:
    - pydantic (snapshot validation, config)
    - pyyaml (config)

Output:
    JSON result with success status and profile
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mentor.emotion import insights, sentiment
from mentor.emotion.config_models import AnalyzerConfig, load_config
from mentor.emotion.models import (
    AggregateSnapshot,
    EmotionProfile,
    InvalidSnapshotError,
    Mood,
    parse_snapshot,
)
from mentor.emotion.rounding import clamp, round_half_up
from mentor.logging_config import get_logger, setup_logging


logger = get_logger(__name__)

MS_PER_MINUTE = 60_000


@dataclass(frozen=True)
class Metrics:
    """Unrounded intermediate metrics of one snapshot."""

    focus_score: float
    switch_rate: float
    typing_intensity: float
    idle_ratio: float
    sentiment_avg: float


class AggregateAnalyzer:
    """Scores snapshots against one fixed configuration."""

    def __init__(self, config: AnalyzerConfig | None = None):
        self._config = config or AnalyzerConfig()
        self._lexicon = self._config.lexicon_pairs()

    @property
    def config(self) -> AnalyzerConfig:
        return self._config

    def metrics(self, snapshot: AggregateSnapshot) -> Metrics:
        total_active_ms = snapshot.total_active_ms
        active_minutes = max(total_active_ms / MS_PER_MINUTE, self._config.active_minutes_floor)

        return Metrics(
            focus_score=clamp(snapshot.productive_ms / max(total_active_ms, 1)),
            switch_rate=snapshot.tab_switches / active_minutes,
            typing_intensity=snapshot.typing_keystrokes / active_minutes,
            idle_ratio=clamp(snapshot.idle_ms / max(snapshot.idle_ms + total_active_ms, 1)),
            sentiment_avg=sentiment.average(snapshot.samples, self._lexicon),
        )

    def stress(self, metrics: Metrics) -> float:
        weights = self._config.stress

        total = clamp((metrics.switch_rate - weights.switch_baseline) / weights.switch_scale)
        if metrics.typing_intensity > weights.typing_threshold:
            total += weights.typing_weight
        if metrics.sentiment_avg < weights.sentiment_threshold:
            total += weights.sentiment_weight
        if metrics.idle_ratio > weights.idle_threshold:
            total += weights.idle_weight

        return clamp(total)

    def classify(self, metrics: Metrics, stress: float) -> Mood:
        t = self._config.thresholds

        if metrics.focus_score > t.focused_min_focus and stress < t.focused_max_stress:
            return Mood.FOCUSED
        if metrics.focus_score > t.calm_min_focus and stress < t.calm_max_stress:
            return Mood.CALM
        if stress >= t.frustrated_min_stress:
            return Mood.FRUSTRATED
        if metrics.idle_ratio > t.tired_min_idle:
            return Mood.TIRED
        if metrics.switch_rate > t.restless_min_switch_rate:
            return Mood.RESTLESS
        return Mood.MIXED

    def analyze(self, snapshot: AggregateSnapshot | Mapping[str, Any]) -> EmotionProfile:
        """
        Score one snapshot.

        Args:
            snapshot: Validated snapshot or a mapping of counters

        Returns:
            EmotionProfile with rounded metrics, mood and messages

        Raises:
            InvalidSnapshotError: Snapshot mapping failed validation
        """
        snapshot = parse_snapshot(snapshot)

        metrics = self.metrics(snapshot)
        stress = self.stress(metrics)
        mood = self.classify(metrics, stress)
        focus_pct = round_half_up(metrics.focus_score * 100)

        insight, action = insights.compose(
            mood,
            focus_pct,
            stress,
            metrics.switch_rate,
            metrics.sentiment_avg,
            self._config.insights,
        )

        profile = EmotionProfile(
            focus_score=metrics.focus_score,
            focus_pct=focus_pct,
            switch_rate=round_half_up(metrics.switch_rate, 2),
            typing_intensity=round_half_up(metrics.typing_intensity),
            idle_ratio=round_half_up(metrics.idle_ratio, 2),
            sentiment_avg=round_half_up(metrics.sentiment_avg, 3),
            stress=round_half_up(stress, 2),
            mood=mood,
            summary=insights.summarize(focus_pct, mood),
            insight=insight,
            action=action,
        )

        logger.debug(
            "profile computed",
            mood=mood.value,
            focus_pct=focus_pct,
            stress=profile.stress,
            samples=len(snapshot.samples),
        )
        return profile


def analyze(
    snapshot: AggregateSnapshot | Mapping[str, Any],
    config: AnalyzerConfig | None = None,
) -> EmotionProfile:
    """Score a snapshot with the given (or default) analyzer configuration."""
    return AggregateAnalyzer(config).analyze(snapshot)


def _read_snapshot(args) -> dict[str, Any]:
    if args.snapshot_file:
        with open(args.snapshot_file) as f:
            return json.load(f)
    return json.loads(args.snapshot)


def main():
    setup_logging()

    parser = argparse.ArgumentParser(
        description="Aggregate Analyzer - Emotion/focus profile from usage counters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Full profile
    python analyzer.py --action analyze --snapshot '{"productiveMs": 3600000}'

    # Intermediate metrics only
    python analyzer.py --action metrics --snapshot-file usage.json
        """,
    )

    parser.add_argument(
        "--action",
        required=True,
        choices=["analyze", "metrics"],
        help="Action to perform",
    )
    parser.add_argument("--snapshot", help="JSON object with snapshot counters")
    parser.add_argument("--snapshot-file", help="Path to a JSON snapshot file")
    parser.add_argument("--config", help="Path to an emotion.yaml override")

    args = parser.parse_args()

    if not args.snapshot and not args.snapshot_file:
        print(json.dumps({"success": False, "error": "--snapshot or --snapshot-file required"}))
        sys.exit(1)

    try:
        raw = _read_snapshot(args)
    except (OSError, json.JSONDecodeError) as e:
        print(json.dumps({"success": False, "error": f"Could not read snapshot: {e}"}))
        sys.exit(1)

    config = load_config(Path(args.config) if args.config else None)
    analyzer = AggregateAnalyzer(config.analyzer)

    try:
        if args.action == "analyze":
            result = {"success": True, "profile": analyzer.analyze(raw).to_dict()}
        else:
            metrics = analyzer.metrics(parse_snapshot(raw))
            result = {"success": True, "metrics": asdict(metrics)}
    except InvalidSnapshotError as e:
        result = {"success": False, "error": str(e)}

    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
