"""Interaction state machine for the filter list.

Translates abstract input actions (text changes, navigation keys, row
hover/click, outside activity) into SearchState transitions and
commit/cancel callbacks. Nothing here depends on a UI toolkit.
"""

import logging
from typing import Any, Callable, Iterable

from .candidate import Candidate
from .fuzzy import Scorer, fuzzy_match
from .ranking import NewEntrySynthesizer, PinOrderPolicy, RankingEngine, rank_candidates
from .state import SearchState

logger = logging.getLogger(__name__)

# Key identifiers, as reported by the terminal view
KEY_UP = "up"
KEY_DOWN = "down"
KEY_ENTER = "enter"
KEY_ESCAPE = "escape"
KEY_SPACE = "space"

SelectCallback = Callable[[Candidate | None], None]
KeyObserver = Callable[[str, str], None]
ActivityListener = Callable[[Any], None]


class ActivityMonitor:
    """Broadcasts pointer activity to subscribed listeners.

    The host feeds every pointer event it sees into ``dispatch``; widgets
    subscribe on mount and call the returned function on unmount.
    """

    def __init__(self) -> None:
        self._listeners: list[ActivityListener] = []

    def subscribe(self, listener: ActivityListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, target: Any) -> None:
        # Iterate over a snapshot: listeners may unsubscribe while notified
        for listener in list(self._listeners):
            listener(target)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


class FilterController:
    """Owns a SearchState and applies user actions to it.

    Args:
        candidates: The searchable set. Never mutated.
        on_select: Called with the committed Candidate, or None on cancel.
        on_key_press: Optional observer called with (key, query_text) for
            every key, before the key is handled.
        on_change: Optional listener called with the state after every mutation.
        allow_new: Append a synthetic entry for the typed text.
        new_hint: Hint shown on the synthetic entry.
        complete_prefix: Text inserted when space is pressed on an empty query.
        skip_exact_match: Suppress the synthetic entry on an exact name match.
        scorer: Fuzzy scoring strategy.

    Example:
        >>> picked = []
        >>> ctrl = FilterController([Candidate("alpha"), Candidate("beta")], picked.append)
        >>> ctrl.text_changed("be")
        >>> ctrl.handle_key("enter")
        True
        >>> picked[0].name
        'beta'
    """

    def __init__(
        self,
        candidates: Iterable[Candidate],
        on_select: SelectCallback,
        on_key_press: KeyObserver | None = None,
        on_change: Callable[[SearchState], None] | None = None,
        allow_new: bool = False,
        new_hint: str | None = None,
        complete_prefix: str | None = None,
        skip_exact_match: bool = False,
        scorer: Scorer = fuzzy_match,
    ) -> None:
        self.candidates: list[Candidate] = list(candidates)
        self.on_select = on_select
        self.on_key_press = on_key_press
        self.on_change = on_change
        self.complete_prefix = complete_prefix

        self._engine = RankingEngine(scorer)
        self._pin_policy = PinOrderPolicy()
        self._synthesizer = NewEntrySynthesizer(allow_new, new_hint, skip_exact_match)
        self._unsubscribe: Callable[[], None] | None = None

        self.state = SearchState(results=self._rank(""))

    # Recomputation

    def _rank(self, query: str) -> list:
        return rank_candidates(
            query,
            self.candidates,
            engine=self._engine,
            pin_policy=self._pin_policy,
            synthesizer=self._synthesizer,
        )

    def _changed(self) -> None:
        if self.on_change:
            self.on_change(self.state)

    def text_changed(self, text: str) -> None:
        """Recompute results for new query text and highlight the first row."""
        self.state.results = self._rank(text)
        self.state.query_text = text
        self.state.highlighted_index = 0
        logger.debug("Query %r -> %d results", text, len(self.state.results))
        self._changed()

    def candidates_changed(self, candidates: Iterable[Candidate]) -> None:
        """Replace the candidate set, keeping the current query text."""
        self.candidates = list(candidates)
        self.state.results = self._rank(self.state.query_text)
        self.state.highlighted_index = 0
        logger.debug("Candidate set replaced (%d candidates)", len(self.candidates))
        self._changed()

    # Navigation

    def move_up(self) -> None:
        self.state.highlighted_index = max(0, self.state.highlighted_index - 1)
        self._changed()

    def move_down(self) -> None:
        last = max(0, len(self.state.results) - 1)
        self.state.highlighted_index = min(last, self.state.highlighted_index + 1)
        self._changed()

    def hover(self, index: int) -> None:
        last = max(0, len(self.state.results) - 1)
        self.state.highlighted_index = max(0, min(index, last))
        self._changed()

    # Commit / cancel

    def commit(self) -> None:
        """Commit the highlighted result. An empty list commits None."""
        scored = self.state.highlighted
        candidate = scored.candidate if scored is not None else None
        logger.info("Commit: %r", candidate.name if candidate else None)
        self.on_select(candidate)

    def cancel(self) -> None:
        logger.info("Cancel")
        self.on_select(None)

    def click(self, index: int) -> None:
        """Commit the result at index; clicks outside the list are ignored."""
        if not 0 <= index < len(self.state.results):
            logger.debug("Ignoring click on missing row %d", index)
            return
        candidate = self.state.results[index].candidate
        logger.info("Commit (click): %r", candidate.name)
        self.on_select(candidate)

    def outside_activity(self) -> None:
        self.cancel()

    # Keyboard

    def handle_key(self, key: str) -> bool:
        """Apply a key press. Returns True when the key's default action must be suppressed.

        The key observer sees every key first. Space completes to
        ``complete_prefix`` only when the query is empty; otherwise it is
        ordinary text input.
        """
        if self.on_key_press:
            self.on_key_press(key, self.state.query_text)

        if key == KEY_UP:
            self.move_up()
        elif key == KEY_DOWN:
            self.move_down()
        elif key == KEY_ENTER:
            self.commit()
            return True
        elif key == KEY_ESCAPE:
            self.cancel()
        elif key == KEY_SPACE:
            if self.complete_prefix and not self.state.query_text:
                self.text_changed(self.complete_prefix)
                return True
        return False

    # Lifecycle

    def mount(self, monitor: ActivityMonitor, contains: Callable[[Any], bool]) -> None:
        """Start cancelling on activity whose target is not inside the widget.

        Args:
            monitor: Source of pointer activity broader than the widget.
            contains: Returns True for targets on the widget's own surface.
        """
        self.unmount()

        def on_activity(target: Any) -> None:
            if not contains(target):
                self.outside_activity()

        self._unsubscribe = monitor.subscribe(on_activity)

    def unmount(self) -> None:
        """Release the outside-activity subscription. Safe to call repeatedly."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    @property
    def is_mounted(self) -> bool:
        return self._unsubscribe is not None

    def __enter__(self) -> "FilterController":
        return self

    def __exit__(self, *exc_info) -> None:
        self.unmount()
