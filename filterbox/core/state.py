"""Search state owned by a single filter widget instance."""

from dataclasses import dataclass, field

from .candidate import ScoredCandidate


@dataclass
class SearchState:
    """Query text, ranked results, and the highlighted row.

    Attributes:
        query_text: Current contents of the search field.
        results: Ranked results; list order is display order.
        highlighted_index: Index into ``results``. Kept within bounds while
            results are non-empty, 0 otherwise.
    """

    query_text: str = ""
    results: list[ScoredCandidate] = field(default_factory=list)
    highlighted_index: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.results

    @property
    def highlighted(self) -> ScoredCandidate | None:
        if 0 <= self.highlighted_index < len(self.results):
            return self.results[self.highlighted_index]
        return None
