"""Widget configuration and candidate files, loaded from YAML."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .candidate import Candidate
from .fuzzy import SCORERS


class ConfigError(ValueError):
    """Raised when a config or candidate file is missing or malformed."""


@dataclass
class FilterListConfig:
    """Construction-time options for a filter list.

    Attributes:
        placeholder: Placeholder text of the search field.
        label: Text shown next to the search field.
        allow_new: Offer a synthetic "create" entry for the typed text.
        new_hint: Hint shown on the synthetic entry.
        help_text: Host-trusted markup shown under the search field.
        complete_prefix: Text inserted when space is pressed on an empty query.
        icon: Glyph shown in front of every row.
        skip_exact_match: Hide the synthetic entry when a name matches exactly.
        scorer: Name of the scoring strategy ("fuzzy" or "substring").
    """

    placeholder: str = ""
    label: str = ""
    allow_new: bool = False
    new_hint: str | None = None
    help_text: str = ""
    complete_prefix: str | None = None
    icon: str | None = None
    skip_exact_match: bool = False
    scorer: str = "fuzzy"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterListConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        config = cls(**data)
        if config.scorer not in SCORERS:
            raise ConfigError(
                f"Unknown scorer {config.scorer!r}, expected one of: {', '.join(SCORERS)}"
            )
        return config


def _read_yaml(path: str | Path) -> Any:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"File not found: {path}")
    try:
        return yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def load_config(config_path: str | Path | None = None) -> FilterListConfig:
    """Load widget options from a YAML mapping. No path means defaults."""
    if config_path is None:
        return FilterListConfig()

    content = _read_yaml(config_path)
    if content is None:
        return FilterListConfig()
    if not isinstance(content, dict):
        raise ConfigError(f"Config must be a mapping: {config_path}")
    return FilterListConfig.from_dict(content)


def load_candidates(path: str | Path) -> list[Candidate]:
    """Load candidates from YAML.

    Accepts either a list, or a mapping with a ``candidates`` list. Each
    entry is a mapping (see Candidate.from_dict) or a bare string name.
    """
    content = _read_yaml(path)
    if isinstance(content, dict):
        content = content.get("candidates")
    if content is None:
        return []
    if not isinstance(content, list):
        raise ConfigError(f"Candidates must be a list: {path}")

    candidates = []
    for i, entry in enumerate(content):
        if isinstance(entry, str):
            candidates.append(Candidate(name=entry))
        elif isinstance(entry, dict):
            candidates.append(Candidate.from_dict(entry))
        else:
            raise ConfigError(f"Candidate #{i} in {path} must be a string or mapping")
    return candidates
