"""
Tool: Sample Sentiment Scorer
Purpose: Score the polarity of short free-text samples the user opted into

Text samples are things like a selected sentence or a quick note typed into
the extension. They are short, so a full language model is overkill: a
small keyword lexicon catches "stuck", "frustrated", "fixed it" well enough
to nudge the stress estimate.

Scoring:
- Lowercase, punctuation becomes whitespace, split into tokens
- Each token takes the weight of the FIRST lexicon stem it starts with
  (lexicon order is the tie-break, e.g. "fail" before a later "failure")
- Sum of weights divided by sqrt(token count), so a short "great!" counts
  more than one positive word buried in a paragraph

Usage:
    python mentor/emotion/sentiment.py --text "stuck on this bug again"
    python mentor/emotion/sentiment.py --text "fixed it, great" --json

Dependencies:
    - re (tokenizing)

Output:
    JSON result with score and token breakdown
"""

import argparse
import json
import math
import re
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any


# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mentor.emotion.rounding import round_half_up


# Ordered (stem, weight) pairs. Order matters: first prefix match wins.
DEFAULT_LEXICON: tuple[tuple[str, float], ...] = (
    ("good", 1),
    ("great", 1),
    ("awesome", 1),
    ("nice", 1),
    ("love", 1),
    ("happy", 1),
    ("done", 1),
    ("fixed", 1),
    ("resolved", 1),
    ("bad", -1),
    ("terrible", -1),
    ("hate", -1),
    ("stuck", -1),
    ("frustrat", -1),
    ("angry", -1),
    ("annoy", -1),
    ("fail", -1),
    ("issue", -1),
)

# ASCII word characters only; everything else that is not whitespace splits tokens
NON_WORD_PATTERN = re.compile(r"[^0-9A-Za-z_\s]")


def tokenize(text: str) -> list[str]:
    """Lowercase and split text into word tokens."""
    cleaned = NON_WORD_PATTERN.sub(" ", text.lower())
    return [t for t in cleaned.split() if t]


def match_stem(token: str, lexicon: Sequence[tuple[str, float]]) -> tuple[str, float] | None:
    """Return the first (stem, weight) whose stem prefixes the token."""
    for stem, weight in lexicon:
        if token.startswith(stem):
            return stem, weight
    return None


def score(text: Any, lexicon: Sequence[tuple[str, float]] = DEFAULT_LEXICON) -> float:
    """
    Score the polarity of a text sample.

    Args:
        text: Sample text. Anything that is not a string scores 0.
        lexicon: Ordered (stem, weight) pairs

    Returns:
        Sum of matched weights divided by sqrt(token count), 0.0 when
        there are no tokens
    """
    if not text or not isinstance(text, str):
        return 0.0

    tokens = tokenize(text)
    if not tokens:
        return 0.0

    total = 0.0
    for token in tokens:
        match = match_stem(token, lexicon)
        if match:
            total += match[1]

    return total / math.sqrt(len(tokens))


def average(samples: Iterable[str], lexicon: Sequence[tuple[str, float]] = DEFAULT_LEXICON) -> float:
    """Mean score over samples, 0.0 when there are none."""
    scores = [score(s, lexicon) for s in samples]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def explain(text: str, lexicon: Sequence[tuple[str, float]] = DEFAULT_LEXICON) -> dict[str, Any]:
    """Score a sample and report which stems matched which tokens."""
    tokens = tokenize(text) if isinstance(text, str) else []
    matches = []
    for token in tokens:
        match = match_stem(token, lexicon)
        if match:
            matches.append({"token": token, "stem": match[0], "weight": match[1]})

    return {
        "success": True,
        "score": round_half_up(score(text, lexicon), 3),
        "token_count": len(tokens),
        "matches": matches,
    }


def main():
    parser = argparse.ArgumentParser(description="Score sentiment of a text sample")
    parser.add_argument("--text", required=True, help="Text sample to score")
    parser.add_argument("--json", action="store_true", help="Output full JSON breakdown")

    args = parser.parse_args()
    result = explain(args.text)

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(f"Score: {result['score']} ({len(result['matches'])} of {result['token_count']} tokens matched)")


if __name__ == "__main__":
    main()
