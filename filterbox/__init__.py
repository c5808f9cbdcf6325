"""Filterable list picker: fuzzy ranking, keyboard navigation, Textual view.

Usage:
    # Pure logic
    from filterbox.core import Candidate, FilterController

    # Launch the picker over a YAML list of candidates
    filterbox --candidates items.yaml
"""

__version__ = "0.1.0"
