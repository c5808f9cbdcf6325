"""Per-row render data derived from a SearchState.

Candidate names are always escaped before they are placed in markup.
Hints and help text are host-trusted markup and pass through untouched.
"""

import html
from dataclasses import dataclass
from typing import Callable, NamedTuple

from rich.markup import escape as rich_escape

from .candidate import ScoredCandidate
from .state import SearchState


class MarkupFormat(NamedTuple):
    """How to escape text and emphasize matched runs for one markup language."""

    escape: Callable[[str], str]
    open_tag: str
    close_tag: str


HTML = MarkupFormat(lambda text: html.escape(text, quote=True), "<b>", "</b>")
RICH = MarkupFormat(rich_escape, "[b]", "[/b]")


@dataclass(frozen=True)
class RowView:
    markup: str
    hint: str | None
    highlighted: bool
    synthetic: bool = False


def highlight(name: str, positions: tuple[int, ...], fmt: MarkupFormat = HTML) -> str:
    """Wrap each contiguous run of matched positions in one open/close pair.

    Every segment, matched or not, is escaped.
    """
    matched = set(positions)
    parts: list[str] = []
    run: list[str] = []
    in_match = False

    for i, char in enumerate(name):
        is_match = i in matched
        if is_match != in_match and run:
            parts.append(_segment("".join(run), in_match, fmt))
            run = []
        in_match = is_match
        run.append(char)

    if run:
        parts.append(_segment("".join(run), in_match, fmt))
    return "".join(parts)


def _segment(text: str, emphasized: bool, fmt: MarkupFormat) -> str:
    escaped = fmt.escape(text)
    if emphasized:
        return f"{fmt.open_tag}{escaped}{fmt.close_tag}"
    return escaped


def render_name(scored: ScoredCandidate, fmt: MarkupFormat = HTML) -> str:
    name = scored.name or ""
    if scored.match is not None and scored.match.positions:
        return highlight(name, scored.match.positions, fmt)
    return fmt.escape(name)


def render_rows(state: SearchState, fmt: MarkupFormat = HTML) -> list[RowView]:
    return [
        RowView(
            markup=render_name(scored, fmt),
            hint=scored.hint,
            highlighted=idx == state.highlighted_index,
            synthetic=scored.synthetic,
        )
        for idx, scored in enumerate(state.results)
    ]
