"""Filter list widget: a search field over a fuzzy-ranked, keyboard-navigable list."""

import logging
from typing import Any, Callable, Iterable

from rich.markup import escape
from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Input, Static

from filterbox.core import (
    RICH,
    SCORERS,
    ActivityMonitor,
    Candidate,
    FilterController,
    FilterListConfig,
    RowView,
    SearchState,
    render_rows,
)
from filterbox.core.controller import KEY_DOWN, KEY_ESCAPE, KEY_UP

logger = logging.getLogger(__name__)

# Keys the list owns even when the controller leaves their default action alone
NAVIGATION_KEYS = {KEY_UP, KEY_DOWN, KEY_ESCAPE}


class SearchInput(Input):
    """Input that offers every key to a handler before its own key handling."""

    def __init__(self, key_handler: Callable[[str], bool], **kwargs) -> None:
        super().__init__(**kwargs)
        self._key_handler = key_handler

    def on_key(self, event: events.Key) -> None:
        if self._key_handler(event.key):
            # Skips Input's own handling (text insertion, submit binding)
            event.prevent_default()
            event.stop()


class ResultRow(Static):
    """One rendered result."""

    class Hovered(Message):
        def __init__(self, row: "ResultRow") -> None:
            super().__init__()
            self.row = row

    class Clicked(Message):
        def __init__(self, row: "ResultRow") -> None:
            super().__init__()
            self.row = row

    def __init__(self, index: int, view: RowView, icon: str | None = None, **kwargs) -> None:
        super().__init__(self.format_row(view, icon), **kwargs)
        self.result_index = index
        self.set_class(view.highlighted, "selected-option")
        self.set_class(view.synthetic, "new-option")

    @staticmethod
    def format_row(view: RowView, icon: str | None = None) -> str:
        """Build row markup. The name is already escaped; the hint is host markup."""
        icon_part = f"{escape(icon)} " if icon else "  "
        hint_part = f"  [i]{view.hint}[/i]" if view.hint else ""
        return f"{icon_part}{view.markup}{hint_part}"

    def on_enter(self, event: events.Enter) -> None:
        self.post_message(self.Hovered(self))

    def on_click(self, event: events.Click) -> None:
        # Row clicks never reach the outside-activity relay
        event.stop()
        self.post_message(self.Clicked(self))


class FilterList(Vertical):
    """Search field plus ranked results; reports a commit or a cancel.

    Typing re-ranks the candidates, up/down move the highlight, enter or a
    row click commits, escape or a click outside the widget cancels.
    Pinned candidates (with an ``order_id``) always sort first.

    The widget cancels on outside clicks when it can reach an
    ``ActivityMonitor``: either passed in, or the app's ``activity`` attribute.
    """

    DEFAULT_CSS = """
    FilterList {
        height: auto;
        max-height: 24;
        background: #141a26;
        border: solid #555c65;
        padding: 0 1;
    }

    FilterList .filter-header {
        height: auto;
    }

    FilterList .filter-label {
        color: #78DCE8;
        text-style: bold;
        margin-bottom: 0;
    }

    FilterList .help-text {
        color: #555c65;
        margin-top: 0;
    }

    FilterList .result-list {
        height: auto;
        max-height: 16;
    }

    FilterList ResultRow {
        height: 1;
        padding: 0 1;
    }

    FilterList ResultRow.selected-option {
        background: #1a2233;
        color: #F2C063;
    }
    """

    class Selected(Message):
        """Message sent on commit (candidate set) or cancel (candidate is None)."""

        def __init__(self, widget: "FilterList", candidate: Candidate | None) -> None:
            super().__init__()
            self.filter_list = widget
            self.candidate = candidate

    _scroll_pending = False

    def __init__(
        self,
        candidates: Iterable[Candidate],
        placeholder: str = "",
        label: str = "",
        on_select: Callable[[Candidate | None], None] | None = None,
        on_key_press: Callable[[str, str], None] | None = None,
        allow_new: bool = False,
        help_text: str = "",
        complete_prefix: str | None = None,
        icon: str | None = None,
        new_hint: str | None = None,
        skip_exact_match: bool = False,
        scorer: str = "fuzzy",
        monitor: ActivityMonitor | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.placeholder = placeholder
        self.label = label
        self.help_text = help_text
        self.icon = icon
        self._select_callback = on_select
        self._monitor = monitor
        self._rendered_results: list | None = None

        self.controller = FilterController(
            candidates,
            on_select=self._emit_selection,
            on_key_press=on_key_press,
            on_change=self._state_changed,
            allow_new=allow_new,
            new_hint=new_hint,
            complete_prefix=complete_prefix,
            skip_exact_match=skip_exact_match,
            scorer=SCORERS[scorer],
        )

    @classmethod
    def from_config(
        cls,
        config: FilterListConfig,
        candidates: Iterable[Candidate],
        **kwargs,
    ) -> "FilterList":
        return cls(
            candidates,
            placeholder=config.placeholder,
            label=config.label,
            allow_new=config.allow_new,
            help_text=config.help_text,
            complete_prefix=config.complete_prefix,
            icon=config.icon,
            new_hint=config.new_hint,
            skip_exact_match=config.skip_exact_match,
            scorer=config.scorer,
            **kwargs,
        )

    @property
    def state(self) -> SearchState:
        return self.controller.state

    def compose(self) -> ComposeResult:
        with Vertical(classes="filter-header"):
            if self.label:
                yield Static(self.label, classes="filter-label")
            yield SearchInput(self._handle_key, placeholder=self.placeholder, id="filter-input")
        if self.help_text:
            # Host-trusted markup, rendered as given
            yield Static(self.help_text, classes="help-text")
        yield VerticalScroll(id="filter-results", classes="result-list")

    def on_mount(self) -> None:
        """Focus the search field once, subscribe to outside activity, draw results."""
        self.query_one(SearchInput).focus()

        monitor = self._monitor or getattr(self.app, "activity", None)
        if isinstance(monitor, ActivityMonitor):
            self.controller.mount(monitor, self.contains_target)
        else:
            logger.debug("No activity monitor available; outside clicks will not cancel")

        self.call_later(self._refresh_results)

    def on_unmount(self) -> None:
        self.controller.unmount()

    def contains_target(self, target: Any) -> bool:
        """True when target is this widget or one of its descendants."""
        ancestors = getattr(target, "ancestors_with_self", None)
        return ancestors is not None and self in ancestors

    def set_candidates(self, candidates: Iterable[Candidate]) -> None:
        """Replace the candidate set; the typed query is kept."""
        self.controller.candidates_changed(candidates)

    # Input -> controller

    def _handle_key(self, key: str) -> bool:
        consumed = self.controller.handle_key(key)
        return consumed or key in NAVIGATION_KEYS

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        # Ignore the echo of values the controller set itself
        if event.value != self.controller.state.query_text:
            self.controller.text_changed(event.value)

    def on_result_row_hovered(self, event: ResultRow.Hovered) -> None:
        event.stop()
        if event.row.result_index != self.controller.state.highlighted_index:
            self.controller.hover(event.row.result_index)

    def on_result_row_clicked(self, event: ResultRow.Clicked) -> None:
        event.stop()
        self.controller.click(event.row.result_index)

    # Controller -> view

    def _emit_selection(self, candidate: Candidate | None) -> None:
        if self._select_callback:
            self._select_callback(candidate)
        self.post_message(self.Selected(self, candidate))

    def _state_changed(self, state: SearchState) -> None:
        try:
            search_input = self.query_one(SearchInput)
        except NoMatches:
            return
        if search_input.value != state.query_text:
            search_input.value = state.query_text
            search_input.cursor_position = len(state.query_text)
        self.call_later(self._refresh_results)

    async def _refresh_results(self) -> None:
        """Sync rows with the current state, then bring the highlighted row into view."""
        try:
            container = self.query_one("#filter-results", VerticalScroll)
        except NoMatches:
            return

        state = self.controller.state
        views = render_rows(state, RICH)

        if state.results is not self._rendered_results:
            self._rendered_results = state.results
            await container.remove_children()
            if views:
                await container.mount_all(
                    [ResultRow(idx, view, self.icon) for idx, view in enumerate(views)]
                )
        else:
            for row in container.query(ResultRow):
                row.set_class(row.result_index == state.highlighted_index, "selected-option")

        self._schedule_scroll()

    def refresh(self, *regions, **kwargs) -> "FilterList":
        # Every render pass, whatever caused it, ends with the highlight in view
        result = super().refresh(*regions, **kwargs)
        self._schedule_scroll()
        return result

    def on_resize(self, event: events.Resize) -> None:
        self._schedule_scroll()

    def _schedule_scroll(self) -> None:
        if self._scroll_pending or not self.is_mounted:
            return
        self._scroll_pending = True
        self.call_after_refresh(self.scroll_to_highlighted)

    def scroll_to_highlighted(self) -> None:
        """Scroll only as far as needed to show the highlighted row."""
        self._scroll_pending = False
        index = self.controller.state.highlighted_index
        for row in self.query(ResultRow):
            if row.result_index == index:
                row.scroll_visible(animate=False)
                break

    def rows(self) -> list[ResultRow]:
        try:
            return list(self.query_one("#filter-results", VerticalScroll).query(ResultRow))
        except NoMatches:
            return []
