"""
Emotion Tools - Focus and mood inference from browsing telemetry

Philosophy:
    Observe, never interrogate. The extension already counts time on
    productive and distracting sites, tab switches, keystrokes and idle
    periods. Those counters are enough to tell "in the zone" from
    "bouncing between tabs" without asking the user how they feel.

Components:
    sentiment.py: Keyword lexicon polarity for opted-in text samples
        - Ordered prefix stems, first match wins
        - Score damped by sqrt(token count)

    analyzer.py: Counters snapshot -> emotion profile
        - Focus score, switch rate, typing intensity, idle ratio
        - Additive stress heuristic
        - Ordered mood classification (focused, calm, frustrated,
          tired, restless, mixed)

    insights.py: Mood -> insight/action text and the summary line

    snapshot.py: Raw stored usage -> validated snapshot
        - Domain classification (productive / distracting / other)
        - Legacy per-domain counters folded into categories
        - Text samples dropped without consent

    models.py: Snapshot, profile and mood types
    config_models.py: Thresholds, lexicon, domains, reminder rules

Configuration: args/emotion.yaml
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_PATH = PROJECT_ROOT / 'args' / 'emotion.yaml'

# Most recent text samples kept for sentiment
SAMPLE_CAPACITY = 10

__all__ = [
    'PROJECT_ROOT',
    'CONFIG_PATH',
    'SAMPLE_CAPACITY',
]
