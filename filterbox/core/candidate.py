"""Data model for candidates and their scored, per-query counterparts."""

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class Candidate:
    """A host-supplied item eligible for matching and selection.

    Attributes:
        name: Display text and match key.
        hint: Optional trailing text, rendered as host-trusted markup.
        order_id: Optional pin key. Any non-None value pins the candidate,
            including falsy ones such as 0 or "".
        extra: Opaque payload carried through unchanged.
    """

    name: str = ""
    hint: str | None = None
    order_id: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_pinned(self) -> bool:
        return self.order_id is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Candidate":
        """Build a candidate from a plain mapping.

        Accepts both ``orderId`` and ``order_id``; unknown keys land in ``extra``.
        """
        known = {"name", "hint", "orderId", "order_id"}
        order_id = data.get("order_id", data.get("orderId"))
        return cls(
            name=str(data.get("name") or ""),
            hint=data.get("hint"),
            order_id=order_id,
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.hint is not None:
            result["hint"] = self.hint
        if self.order_id is not None:
            result["orderId"] = self.order_id
        result.update(self.extra)
        return result


@dataclass(frozen=True)
class MatchInfo:
    """Fuzzy score plus the matched character offsets used for highlighting.

    ``tier`` is the kind of match (prefix, contiguous, scattered) and always
    outranks ``score``, which only orders matches within one tier.
    """

    score: float
    positions: tuple[int, ...] = ()
    tier: int = 0


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate annotated for one ranking pass.

    ``match`` is None for an empty query and for the synthetic "create" entry.
    """

    candidate: Candidate
    match: MatchInfo | None = None
    synthetic: bool = False

    @property
    def name(self) -> str:
        return self.candidate.name

    @property
    def hint(self) -> str | None:
        return self.candidate.hint

    @property
    def order_id(self) -> Any:
        return self.candidate.order_id

    @property
    def is_pinned(self) -> bool:
        return self.candidate.is_pinned
