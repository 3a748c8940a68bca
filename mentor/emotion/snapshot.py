"""
Tool: Snapshot Builder
Purpose: Build a validated analysis snapshot from the extension's stored usage

The background worker stores one flat `usage` record. Newer builds keep
per-category totals (`productive`, `distracting`, `other`); older builds
stored milliseconds per domain (`github.com: 120000`). Both shapes are folded
into the same AggregateSnapshot here, so the analyzer only sees one shape.

Text samples are privacy sensitive. They are only passed on when the user
has given consent (the stored `consentText` timestamp); otherwise the sample
list is emptied before analysis.

Usage:
    python mentor/emotion/snapshot.py --action classify --url https://www.github.com/org/repo
    python mentor/emotion/snapshot.py --action build --usage '{"github.com": 600000, "tabSwitches": 4}'
    python mentor/emotion/snapshot.py --action recompute --usage-file usage.json --consent

Dependencies:
    - pydantic (snapshot validation)
    - pyyaml (domain lists in args/emotion.yaml)

Output:
    JSON result with success status and data
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any
from urllib.parse import urlparse


# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mentor.automation.reminder_policy import ReminderPolicy
from mentor.emotion import SAMPLE_CAPACITY
from mentor.emotion.analyzer import AggregateAnalyzer
from mentor.emotion.config_models import DomainConfig, EmotionConfig, load_config
from mentor.emotion.models import AggregateSnapshot, InvalidSnapshotError, parse_snapshot
from mentor.logging_config import get_logger, setup_logging


logger = get_logger(__name__)

CATEGORIES = ["productive", "distracting", "other"]

# Usage keys that are counters, not per-domain durations
META_KEYS = {
    "tabSwitches",
    "typingKeystrokes",
    "idleMs",
    "samples",
    "mediaPlayMs",
    "mediaPlays",
    "mediaEvents",
    "productive",
    "distracting",
    "other",
}

# Stored usage key -> snapshot field
COUNTER_FIELDS = {
    "tabSwitches": "tab_switches",
    "typingKeystrokes": "typing_keystrokes",
    "idleMs": "idle_ms",
    "mediaPlayMs": "media_play_ms",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def domain_from_url(url: str) -> str:
    """Hostname of a URL without a leading www., empty if unparsable."""
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return hostname.removeprefix("www.")


def classify_domain(domain: str, config: DomainConfig | None = None) -> str:
    """
    Classify a domain as productive, distracting or other.

    Matching is by substring, productive list first, so "jira" matches
    any Atlassian host.
    """
    config = config or DomainConfig()
    if not domain:
        return "other"

    domain = domain.lower()
    if any(d in domain for d in config.productive):
        return "productive"
    if any(d in domain for d in config.distracting):
        return "distracting"
    return "other"


def normalize_usage(usage: Mapping[str, Any], config: DomainConfig | None = None) -> dict[str, Any]:
    """
    Fold a stored usage record into snapshot fields.

    Args:
        usage: Raw `usage` record from extension storage
        config: Domain lists for legacy per-domain records

    Returns:
        dict keyed by AggregateSnapshot field names. Values are passed
        through unchanged so validation can reject bad ones.
    """
    normalized: dict[str, Any] = {
        "productive_ms": 0,
        "distracting_ms": 0,
        "other_ms": 0,
        "samples": usage.get("samples") or [],
    }

    for key, field_name in COUNTER_FIELDS.items():
        if key in usage:
            normalized[field_name] = usage[key]

    has_category_keys = _is_number(usage.get("productive")) or _is_number(usage.get("distracting"))

    if has_category_keys:
        for category in CATEGORIES:
            if category in usage:
                normalized[f"{category}_ms"] = usage[category]
        return normalized

    # Legacy record: milliseconds stored per domain
    for key, value in usage.items():
        if key in META_KEYS:
            continue
        if not _is_number(value):
            logger.debug("skipping non-numeric usage entry", key=key)
            continue
        category = classify_domain(str(key), config)
        normalized[f"{category}_ms"] += int(value)

    return normalized


def build_snapshot(
    usage: Mapping[str, Any],
    consent_text: str | None = None,
    config: DomainConfig | None = None,
) -> AggregateSnapshot:
    """
    Build the snapshot the analyzer consumes.

    Args:
        usage: Raw `usage` record from extension storage
        consent_text: Stored consent marker; falsy means no text samples
        config: Domain lists

    Returns:
        Validated AggregateSnapshot

    Raises:
        InvalidSnapshotError: Counters have wrong types or negative values
    """
    if not isinstance(usage, Mapping):
        raise InvalidSnapshotError(f"Usage must be a mapping, got {type(usage).__name__}")

    normalized = normalize_usage(usage, config)
    if not consent_text:
        normalized["samples"] = []

    return parse_snapshot(normalized)


def add_sample(samples: Sequence[str], text: Any, capacity: int = SAMPLE_CAPACITY) -> list[str]:
    """Append a text sample, keeping only the most recent `capacity` entries."""
    updated = list(samples)
    if not isinstance(text, str):
        return updated
    updated.append(text)
    return updated[-capacity:]


def recompute(
    usage: Mapping[str, Any],
    consent_text: str | None = None,
    config: EmotionConfig | None = None,
) -> dict[str, Any]:
    """
    Rebuild the emotion profile and reminder intents from stored usage.

    Returns:
        {"success": True, "profile": {...}, "reminders": [...]} or
        {"success": False, "error": str} when the usage record is invalid
    """
    config = config or load_config()

    try:
        snapshot = build_snapshot(usage, consent_text, config.domains)
    except InvalidSnapshotError as e:
        logger.warning("usage record rejected", error=str(e))
        return {"success": False, "error": str(e)}

    profile = AggregateAnalyzer(config.analyzer).analyze(snapshot)
    intents = ReminderPolicy(config.reminders).evaluate(profile, snapshot.media_play_ms)

    logger.info(
        "emotion profile updated",
        mood=profile.mood.value,
        focus_pct=profile.focus_pct,
        reminders=[i.type.value for i in intents],
    )

    return {
        "success": True,
        "profile": profile.to_dict(),
        "reminders": [i.to_dict() for i in intents],
    }


def _read_usage(args) -> Any:
    if args.usage_file:
        with open(args.usage_file) as f:
            return json.load(f)
    return json.loads(args.usage)


def main():
    setup_logging()

    parser = argparse.ArgumentParser(description="Snapshot Builder - Stored usage to analysis snapshot")
    parser.add_argument(
        "--action",
        required=True,
        choices=["classify", "build", "recompute"],
        help="Action to perform",
    )
    parser.add_argument("--url", help="URL or domain to classify")
    parser.add_argument("--usage", help="JSON usage record")
    parser.add_argument("--usage-file", help="Path to a JSON usage record")
    parser.add_argument("--consent", action="store_true", help="Include text samples")

    args = parser.parse_args()
    config = load_config()

    if args.action == "classify":
        if not args.url:
            print(json.dumps({"success": False, "error": "--url required for classify action"}))
            sys.exit(1)
        domain = domain_from_url(args.url) if "://" in args.url else args.url
        result = {
            "success": True,
            "domain": domain,
            "category": classify_domain(domain, config.domains),
        }
        print(json.dumps(result, indent=2))
        return

    if not args.usage and not args.usage_file:
        print(json.dumps({"success": False, "error": "--usage or --usage-file required"}))
        sys.exit(1)

    try:
        usage = _read_usage(args)
    except (OSError, json.JSONDecodeError) as e:
        print(json.dumps({"success": False, "error": f"Could not read usage: {e}"}))
        sys.exit(1)

    consent = "cli" if args.consent else None

    if args.action == "build":
        try:
            snapshot = build_snapshot(usage, consent, config.domains)
            result = {"success": True, "snapshot": snapshot.model_dump(by_alias=True)}
        except InvalidSnapshotError as e:
            result = {"success": False, "error": str(e)}
    else:
        result = recompute(usage, consent, config)

    print(json.dumps(result, indent=2))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
