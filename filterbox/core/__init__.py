"""UI-independent core: candidates, ranking, search state, interaction."""

from .candidate import Candidate, MatchInfo, ScoredCandidate
from .config import ConfigError, FilterListConfig, load_candidates, load_config
from .controller import ActivityMonitor, FilterController
from .fuzzy import SCORERS, Scorer, fuzzy_match, substring_match
from .ranking import NewEntrySynthesizer, PinOrderPolicy, RankingEngine, rank_candidates
from .render import HTML, RICH, MarkupFormat, RowView, highlight, render_name, render_rows
from .state import SearchState

__all__ = [
    "ActivityMonitor",
    "Candidate",
    "ConfigError",
    "FilterController",
    "FilterListConfig",
    "HTML",
    "MarkupFormat",
    "MatchInfo",
    "NewEntrySynthesizer",
    "PinOrderPolicy",
    "RICH",
    "RankingEngine",
    "RowView",
    "SCORERS",
    "ScoredCandidate",
    "Scorer",
    "SearchState",
    "fuzzy_match",
    "highlight",
    "load_candidates",
    "load_config",
    "rank_candidates",
    "render_name",
    "render_rows",
    "substring_match",
]
