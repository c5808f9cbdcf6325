"""Tests for the FilterList widget and the host app."""

import asyncio
import sys

import pytest
from textual import events
from textual.app import App, ComposeResult
from textual.widgets import Static

from filterbox.core import ActivityMonitor, Candidate, FilterListConfig
from filterbox.tui.app import FilterListApp, main
from filterbox.tui.widgets import FilterList, ResultRow, SearchInput


CANDIDATES = [Candidate("alpha"), Candidate("beta"), Candidate("gamma")]


class PickerApp(App):
    """Minimal host: one FilterList plus an area outside it."""

    def __init__(self, candidates=CANDIDATES, **options) -> None:
        super().__init__()
        self.activity = ActivityMonitor()
        self.selections = []
        self.messages = []
        self._candidates = candidates
        self._options = options

    def compose(self) -> ComposeResult:
        yield FilterList(
            self._candidates,
            on_select=self.selections.append,
            id="filter",
            **self._options,
        )
        yield Static("outside", id="outside")

    def on_click(self, event: events.Click) -> None:
        self.activity.dispatch(event.widget)

    def on_filter_list_selected(self, event: FilterList.Selected) -> None:
        self.messages.append(event.candidate)


class TestFilterListWidget:
    """Test the FilterList widget inside a host app."""

    @pytest.mark.asyncio(loop_scope="function")
    async def test_input_focused_on_mount(self):
        """Test that the search field has focus right away."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            assert isinstance(pilot.app.focused, SearchInput)

    @pytest.mark.asyncio(loop_scope="function")
    async def test_rows_rendered_for_empty_query(self):
        """Test that every candidate gets a row, first one highlighted."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            rows = pilot.app.query_one(FilterList).rows()
            assert len(rows) == 3
            assert rows[0].has_class("selected-option")
            assert not rows[1].has_class("selected-option")

    @pytest.mark.asyncio(loop_scope="function")
    async def test_typing_filters_rows(self):
        """Test that typing re-ranks and re-renders the results."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("g", "a")
            await pilot.pause(delay=0.1)
            filter_list = pilot.app.query_one(FilterList)
            assert filter_list.state.query_text == "ga"
            assert [r.name for r in filter_list.state.results] == ["gamma"]
            assert len(filter_list.rows()) == 1

    @pytest.mark.asyncio(loop_scope="function")
    async def test_arrow_keys_move_highlight(self):
        """Test that down/up move the highlighted row."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("down", "down", "down", "up")
            await pilot.pause(delay=0.1)
            filter_list = pilot.app.query_one(FilterList)
            assert filter_list.state.highlighted_index == 1
            rows = filter_list.rows()
            assert rows[1].has_class("selected-option")
            assert not rows[0].has_class("selected-option")

    @pytest.mark.asyncio(loop_scope="function")
    async def test_enter_commits(self):
        """Test that enter commits the highlighted candidate once."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("down", "enter")
            await pilot.pause(delay=0.1)
            assert pilot.app.selections == [CANDIDATES[1]]
            assert pilot.app.messages == [CANDIDATES[1]]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_escape_cancels(self):
        """Test that escape reports None."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("escape")
            await pilot.pause(delay=0.1)
            assert pilot.app.selections == [None]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_space_completes_prefix(self):
        """Test space on an empty query, then space as plain text."""
        app = PickerApp(
            candidates=[Candidate("/cmd open"), Candidate("notes")],
            complete_prefix="/cmd ",
        )
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("space")
            await pilot.pause(delay=0.1)
            filter_list = pilot.app.query_one(FilterList)
            search_input = filter_list.query_one(SearchInput)
            assert search_input.value == "/cmd "
            assert filter_list.state.query_text == "/cmd "
            assert [r.name for r in filter_list.state.results] == ["/cmd open"]

            await pilot.press("space")
            await pilot.pause(delay=0.1)
            assert search_input.value == "/cmd  "
            assert filter_list.state.query_text == "/cmd  "

    @pytest.mark.asyncio(loop_scope="function")
    async def test_key_observer_sees_keys(self):
        """Test that the raw key observer runs for every key."""
        seen = []
        app = PickerApp(on_key_press=lambda key, text: seen.append((key, text)))
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("a")
            await pilot.pause(delay=0.1)
            await pilot.press("down")
            await pilot.pause(delay=0.1)
            assert seen == [("a", ""), ("down", "a")]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_hover_highlights_row(self):
        """Test that a hovered row becomes the highlighted one."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            filter_list = pilot.app.query_one(FilterList)
            # Rows are one line each, so y=2 inside the list is the third row
            await pilot.hover("#filter-results", offset=(2, 2))
            await pilot.pause(delay=0.1)
            assert filter_list.state.highlighted_index == 2
            assert filter_list.rows()[2].has_class("selected-option")
            assert not filter_list.rows()[0].has_class("selected-option")

    @pytest.mark.asyncio(loop_scope="function")
    async def test_refresh_scrolls_highlight_into_view(self):
        """Test that a repaint with no state change still reveals the highlighted row."""
        app = PickerApp(candidates=[Candidate(f"item{i:02d}") for i in range(40)])
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            filter_list = pilot.app.query_one(FilterList)
            results = filter_list.query_one("#filter-results")
            assert results.scroll_y == 0

            filter_list.state.highlighted_index = 35
            filter_list.refresh()
            await pilot.pause(delay=0.2)
            assert results.scroll_y > 0

    @pytest.mark.asyncio(loop_scope="function")
    async def test_row_click_commits_without_cancel(self):
        """Test that clicking a row commits and never reaches the outside relay."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.click(ResultRow)
            await pilot.pause(delay=0.1)
            assert pilot.app.selections == [CANDIDATES[0]]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_outside_click_cancels(self):
        """Test that a click outside the widget cancels."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.click("#outside")
            await pilot.pause(delay=0.1)
            assert pilot.app.selections == [None]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_click_on_input_does_not_cancel(self):
        """Test that clicks on the search field are inside the widget."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.click(SearchInput)
            await pilot.pause(delay=0.1)
            assert pilot.app.selections == []

    @pytest.mark.asyncio(loop_scope="function")
    async def test_unmount_releases_subscription(self):
        """Test that removing the widget unsubscribes from outside activity."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            assert pilot.app.activity.listener_count == 1
            await pilot.app.query_one(FilterList).remove()
            await pilot.pause(delay=0.1)
            assert pilot.app.activity.listener_count == 0
            await pilot.click("#outside")
            await pilot.pause(delay=0.1)
            assert pilot.app.selections == []

    @pytest.mark.asyncio(loop_scope="function")
    async def test_set_candidates_keeps_query(self):
        """Test that a new candidate set re-ranks against the typed text."""
        app = PickerApp()
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("a", "b")
            await pilot.pause(delay=0.1)
            filter_list = pilot.app.query_one(FilterList)
            filter_list.set_candidates([Candidate("abacus"), Candidate("zebra"), Candidate("crab")])
            await pilot.pause(delay=0.1)
            assert filter_list.state.query_text == "ab"
            assert filter_list.query_one(SearchInput).value == "ab"
            assert [r.name for r in filter_list.state.results] == ["abacus", "crab"]
            assert len(filter_list.rows()) == 2

    @pytest.mark.asyncio(loop_scope="function")
    async def test_new_entry_row(self):
        """Test that the synthetic entry is rendered last."""
        app = PickerApp(allow_new=True, new_hint="Create")
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("z", "z")
            await pilot.pause(delay=0.1)
            rows = pilot.app.query_one(FilterList).rows()
            assert len(rows) == 1
            assert rows[0].has_class("new-option")
            await pilot.press("enter")
            await pilot.pause(delay=0.1)
            assert pilot.app.selections == [Candidate("zz", hint="Create")]


class TestResultRow:
    """Test row markup."""

    def test_format_row_with_icon_and_hint(self):
        from filterbox.core import RowView

        view = RowView(markup="[b]al[/b]pha", hint="[dim]h[/dim]", highlighted=False)
        assert ResultRow.format_row(view, ">") == "> [b]al[/b]pha  [i][dim]h[/dim][/i]"

    def test_format_row_without_icon(self):
        from filterbox.core import RowView

        view = RowView(markup="alpha", hint=None, highlighted=True)
        assert ResultRow.format_row(view) == "  alpha"


class TestFilterListApp:
    """Test the host application."""

    @pytest.mark.asyncio(loop_scope="function")
    async def test_app_starts(self):
        """Test that the app starts with a FilterList built from config."""
        config = FilterListConfig(label="Open", placeholder="Type...")
        app = FilterListApp(CANDIDATES, config)
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            assert pilot.app.is_running
            filter_list = pilot.app.query_one(FilterList)
            assert filter_list.label == "Open"
            assert filter_list.query_one(SearchInput).placeholder == "Type..."

    @pytest.mark.asyncio(loop_scope="function")
    async def test_enter_exits_with_candidate(self):
        """Test that committing exits the app with the candidate."""
        app = FilterListApp(CANDIDATES)
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("enter")
            await asyncio.sleep(0.1)
            assert not pilot.app.is_running
        assert app.return_value is CANDIDATES[0]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_escape_exits_with_none(self):
        """Test that cancelling exits the app with None."""
        app = FilterListApp(CANDIDATES)
        async with app.run_test() as pilot:
            await pilot.pause(delay=0.1)
            await pilot.press("escape")
            await asyncio.sleep(0.1)
            assert not pilot.app.is_running
        assert app.return_value is None


class TestMain:
    """Test the command-line entry point."""

    def test_missing_candidates_file(self, tmp_path, monkeypatch, capsys):
        """Test that config errors exit with status 1."""
        monkeypatch.setattr(
            sys, "argv", ["filterbox", "--candidates", str(tmp_path / "missing.yaml")]
        )
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err
