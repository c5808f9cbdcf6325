"""Ranking pipeline: fuzzy relevance, pin ordering, synthetic "create" entry.

All three stages are pure functions of their inputs and are re-run from
scratch on every query or candidate-set change.
"""

import logging
from typing import Iterable, Sequence

from .candidate import Candidate, ScoredCandidate
from .fuzzy import Scorer, fuzzy_match

logger = logging.getLogger(__name__)


class RankingEngine:
    """Scores candidates against a query with a pluggable scorer.

    Example:
        >>> engine = RankingEngine()
        >>> candidates = [Candidate("TinyStories"), Candidate("tests")]
        >>> [s.name for s in engine.rank("ts", candidates)]
        ['tests', 'TinyStories']
    """

    def __init__(self, scorer: Scorer = fuzzy_match):
        self.scorer = scorer

    def rank(self, query: str, candidates: Iterable[Candidate]) -> list[ScoredCandidate]:
        """Rank candidates by relevance to query.

        An empty query keeps every candidate, in input order, with no match info.
        Otherwise only matching candidates are kept, best match kind first,
        then best score; ties keep their input order.
        """
        if not query:
            return [ScoredCandidate(c) for c in candidates]

        scored = []
        for candidate in candidates:
            match = self.scorer(query, candidate.name or "")
            if match is not None:
                scored.append(ScoredCandidate(candidate, match))

        # Match kind first, so a contiguous match never falls below a scattered one
        scored.sort(key=lambda s: (-s.match.tier, -s.match.score))
        return scored


class PinOrderPolicy:
    """Moves pinned candidates ahead of everything else.

    Pinned candidates are ordered by ascending ``order_id``; unpinned ones
    keep their relevance order. Pinning is absolute priority, not a tie-break.
    Keys of different types never compare to each other: numbers sort before
    strings, and anything else sorts last by its repr.
    """

    @staticmethod
    def sort_key(scored: ScoredCandidate) -> tuple:
        if not scored.is_pinned:
            return (1,)
        order_id = scored.order_id
        if isinstance(order_id, (int, float)):
            return (0, 0, order_id)
        if isinstance(order_id, str):
            return (0, 1, order_id)
        return (0, 2, repr(order_id))

    def reorder(self, scored: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
        # sorted() is stable, so unpinned items keep their relative order
        return sorted(scored, key=self.sort_key)


class NewEntrySynthesizer:
    """Appends a synthetic "create <query>" entry to the results.

    Args:
        allow_new: When False, results pass through unchanged.
        new_hint: Hint shown on the synthetic entry.
        skip_exact_match: Suppress the synthetic entry when a result's name
            equals the query exactly. Off by default: the entry is always
            appended, even for an empty query.
    """

    def __init__(
        self,
        allow_new: bool = False,
        new_hint: str | None = None,
        skip_exact_match: bool = False,
    ):
        self.allow_new = allow_new
        self.new_hint = new_hint
        self.skip_exact_match = skip_exact_match

    def augment(self, query: str, results: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
        results = list(results)
        if not self.allow_new:
            return results

        if self.skip_exact_match and any(r.name == query for r in results):
            return results

        results.append(
            ScoredCandidate(Candidate(name=query, hint=self.new_hint), synthetic=True)
        )
        return results


def rank_candidates(
    query: str,
    candidates: Iterable[Candidate],
    engine: RankingEngine | None = None,
    pin_policy: PinOrderPolicy | None = None,
    synthesizer: NewEntrySynthesizer | None = None,
) -> list[ScoredCandidate]:
    """Run the full pipeline: rank, reorder pins, then add the synthetic entry."""
    engine = engine or RankingEngine()
    pin_policy = pin_policy or PinOrderPolicy()
    synthesizer = synthesizer or NewEntrySynthesizer()

    results = synthesizer.augment(query, pin_policy.reorder(engine.rank(query, candidates)))
    logger.debug("Ranked %d results for query %r", len(results), query)
    return results
