"""
Configuration file support for gather requests.

A gather request (which assays, which features, which alias columns) can be
kept in a YAML or JSON file next to an analysis and replayed with
tidybio.extract.gather_from_config.

Example ``gather.yaml``::

    feature_ids: [BRAF, EGFR, KRAS]
    data_types: [rna, mutation]
    feature_col: [Symbol, gene_name]
    resp_ids: [Erlotinib]
    resp_col: drug_name
    on_unresolved: warn
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from tidybio.core.exceptions import ConfigurationMismatchError

__all__ = ['GatherConfig', 'load_config']


@dataclass
class GatherConfig:
    """
    Keyword arguments of tidybio.extract.gather, as a reusable object.

    None keeps the facade default (None selector = all).
    """
    sample_ids: Optional[List[str]] = None
    feature_ids: Optional[List[str]] = None
    sample_col: Optional[str] = None
    feature_col: Union[None, str, List[Optional[str]]] = None
    data_types: Optional[List[str]] = None
    resp_ids: Optional[List[str]] = None
    resp_col: Optional[str] = None
    resp_types: Optional[List[str]] = None
    on_unresolved: str = "warn"

    def __post_init__(self):
        if self.on_unresolved not in ("warn", "ignore", "raise"):
            raise ValueError(
                f"on_unresolved must be 'warn', 'ignore' or 'raise', got {self.on_unresolved!r}"
            )
        if (isinstance(self.feature_col, list) and self.data_types is not None
                and len(self.feature_col) != len(self.data_types)):
            raise ConfigurationMismatchError(
                f"feature_col has {len(self.feature_col)} entries for "
                f"{len(self.data_types)} data_types"
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'GatherConfig':
        """
        Build from a mapping, rejecting unknown keys.

        Raises:
            ValueError: If config has keys that are not GatherConfig fields
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise ValueError(f"Unknown gather config keys: {unknown}. Valid: {sorted(known)}")
        return cls(**config)

    @classmethod
    def from_file(cls, config_path: Path) -> 'GatherConfig':
        """Load and validate a YAML/JSON gather config."""
        return cls.from_dict(load_config(Path(config_path)))

    def as_kwargs(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in gather config: {e}") from e


def _parse_json(text: str) -> Any:
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in gather config: {e}") from e


_PARSERS = {'.yaml': _parse_yaml, '.yml': _parse_yaml, '.json': _parse_json}


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Read a gather config file into a plain mapping.

    The parser is chosen by suffix (.yaml, .yml or .json). An empty file is
    an empty request and yields {}; GatherConfig.from_dict then checks the
    keys.

    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: On an unsupported suffix, a parse error, or a top level
            that is not a mapping
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    parser = _PARSERS.get(config_path.suffix.lower())
    if parser is None:
        raise ValueError(
            f"Unsupported config format '{config_path.suffix}' for {config_path.name}; "
            f"expected one of {sorted(_PARSERS)}"
        )

    config = parser(config_path.read_text(encoding='utf-8'))
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(
            f"Gather config {config_path.name} must hold a mapping at top level, "
            f"got {type(config).__name__}"
        )
    return config
