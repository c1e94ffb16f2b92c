"""
Configuration loading: YAML overrides applied to Pydantic model defaults.

Defaults live in ``config.py``; YAML files only list the values they change.
A YAML file may name a parent with ``extends: <filename>`` (resolved relative
to the file itself); the child always wins.
"""

from pathlib import Path
from typing import Any

import yaml

from src.shared.config import Config
from src.shared.dicts import deep_merge_dicts

_EXTENDS_KEY = "extends"


def load_config(path: str | Path | None = None, **overrides: Any) -> Config:
    """
    Build a :class:`Config` from defaults, an optional YAML file and keyword overrides.

    Keyword overrides use ``__`` to reach nested sections, e.g.
    ``simulation__num_games=50`` or ``heuristics__trash_focus_error=8``.
    When a YAML file is given and it does not set ``system.config_name``,
    the file stem is used as the config name.

    Examples:
        >>> cfg = load_config()
        >>> cfg = load_config("config/quick_test.yaml")
        >>> cfg = load_config("config/quick_test.yaml", simulation__num_games=5)
        >>> cfg = load_config(simulation__num_players=3)
    """
    config = Config.default()

    if path is not None:
        path = Path(path)
        data = _read_yaml_chain(path, seen=set())
        data.setdefault("system", {}).setdefault("config_name", path.stem)
        config = config.merge(data)

    if overrides:
        config = config.merge(_nest_overrides(overrides))

    return config


def _read_yaml_chain(path: Path, seen: set[Path]) -> dict[str, Any]:
    """Read ``path`` and every file it extends, parents first."""
    resolved = path.resolve()
    if resolved in seen:
        raise ValueError(f"Circular 'extends' chain at {path}")
    seen.add(resolved)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    parent = data.pop(_EXTENDS_KEY, None)
    if parent is None:
        return data
    return deep_merge_dicts(_read_yaml_chain(path.parent / parent, seen), data)


def _nest_overrides(flat: dict[str, Any]) -> dict[str, Any]:
    """Turn ``{"a__b": 1}`` into ``{"a": {"b": 1}}``."""
    nested: dict[str, Any] = {}
    for key, value in flat.items():
        *parents, leaf = key.split("__")
        node = nested
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value
    return nested
