"""Custom TUI widgets."""

from .filter_list import FilterList, ResultRow, SearchInput

__all__ = [
    "FilterList",
    "ResultRow",
    "SearchInput",
]
