"""Fuzzy matching strategies used to score candidates against a query."""

from typing import Callable

from .candidate import MatchInfo

# A scorer returns None when the text does not match the pattern at all.
Scorer = Callable[[str, str], MatchInfo | None]

WORD_BOUNDARIES = "/ -_."

# Match kinds, best first when sorted descending
TIER_SCATTERED = 0
TIER_SUBSTRING = 1
TIER_PREFIX = 2


def fuzzy_match(pattern: str, text: str) -> MatchInfo | None:
    """Check if pattern fuzzy-matches text, with score and matched positions.

    Characters in pattern must appear in text in order, but not necessarily
    consecutively. Higher score = better match.

    Args:
        pattern: The search pattern (e.g., "ts")
        text: The text to match against (e.g., "TinyStories")

    Returns:
        MatchInfo for a match, None otherwise. The tier puts prefix matches
        above contiguous substrings, and both above scattered matches:
        - Prefix matches score by pattern length
        - Contiguous substring matches score higher the earlier they start
        - Scattered matches score by consecutive runs and word boundaries
    """
    text = text or ""
    if not pattern:
        return MatchInfo(0)

    pattern = pattern.lower()
    text_lower = text.lower()

    if text_lower.startswith(pattern):
        return MatchInfo(1000 + len(pattern), tuple(range(len(pattern))), TIER_PREFIX)

    pos = text_lower.find(pattern)
    if pos >= 0:
        return MatchInfo(500 - pos, tuple(range(pos, pos + len(pattern))), TIER_SUBSTRING)

    # Character-by-character match
    pattern_idx = 0
    score = 0
    prev_match_idx = -2  # no previous match; index 0 is not "consecutive"
    positions = []

    for i, char in enumerate(text_lower):
        if pattern_idx < len(pattern) and char == pattern[pattern_idx]:
            pattern_idx += 1
            positions.append(i)

            if prev_match_idx == i - 1:
                score += 10
            else:
                score += 1

            if i == 0 or text[i - 1] in WORD_BOUNDARIES:
                score += 20

            prev_match_idx = i

    if pattern_idx == len(pattern):
        return MatchInfo(score, tuple(positions), TIER_SCATTERED)
    return None


def substring_match(pattern: str, text: str) -> MatchInfo | None:
    """Plain case-insensitive "contains" filter.

    Every match scores the same, so ranking keeps the candidates' input order.
    """
    text = text or ""
    if not pattern:
        return MatchInfo(0)

    pos = text.lower().find(pattern.lower())
    if pos < 0:
        return None
    return MatchInfo(1, tuple(range(pos, pos + len(pattern))))


SCORERS: dict[str, Scorer] = {
    "fuzzy": fuzzy_match,
    "substring": substring_match,
}
