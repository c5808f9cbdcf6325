"""Textual host application for the filter list.

Launch with:
    python -m filterbox.tui --candidates items.yaml
    # or after installing:
    filterbox --candidates items.yaml --config configs/default.yaml
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Static

from filterbox.core import (
    ActivityMonitor,
    Candidate,
    ConfigError,
    FilterListConfig,
    load_candidates,
    load_config,
)
from filterbox.utils import setup_logger

from .widgets import FilterList

logger = logging.getLogger(__name__)


class FilterListApp(App[Candidate | None]):
    """Shows one FilterList and exits with its selection.

    Every click the app sees is relayed to ``activity`` so the filter list
    can cancel on clicks outside itself.
    """

    TITLE = "filterbox"

    BINDINGS = [
        Binding("ctrl+c", "cancel", "Cancel", show=True, priority=True),
    ]

    DEFAULT_CSS = """
    Screen {
        align: center top;
        padding-top: 2;
        background: #0a1220;
    }

    FilterList {
        width: 80%;
    }

    #outside {
        dock: bottom;
        color: #555c65;
    }
    """

    def __init__(
        self,
        candidates: Iterable[Candidate],
        config: FilterListConfig | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.candidates = list(candidates)
        self.filter_config = config or FilterListConfig()
        self.activity = ActivityMonitor()

    def compose(self) -> ComposeResult:
        yield FilterList.from_config(self.filter_config, self.candidates, id="filter")
        yield Static("Click anywhere outside the list to cancel.", id="outside")
        yield Footer()

    def on_click(self, event: events.Click) -> None:
        self.activity.dispatch(event.widget)

    def on_filter_list_selected(self, event: FilterList.Selected) -> None:
        self.exit(event.candidate)

    def action_cancel(self) -> None:
        self.exit(None)


def main():
    parser = argparse.ArgumentParser(
        description="Pick one item from a list with fuzzy search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Pick from a YAML list of names or {name, hint, orderId} mappings
  filterbox --candidates items.yaml

  # Use widget options from a config file and log to a file
  filterbox --candidates items.yaml --config configs/default.yaml --log-file logs/filterbox.log
        """,
    )
    parser.add_argument(
        "--candidates",
        type=str,
        required=True,
        help="YAML file with the candidate list",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with widget options (placeholder, label, allow_new, ...)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write debug logs to this file",
    )
    args = parser.parse_args()

    if args.log_file:
        setup_logger(Path(args.log_file), level=logging.DEBUG)

    try:
        config = load_config(args.config)
        candidates = load_candidates(args.candidates)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Loaded %d candidates from %s", len(candidates), args.candidates)
    selected = FilterListApp(candidates, config).run()

    if selected is None:
        print("cancelled")
    else:
        print(json.dumps(selected.to_dict(), default=str))


if __name__ == "__main__":
    main()
