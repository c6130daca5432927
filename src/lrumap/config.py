"""Configuration for `LruMap` instances.

The only knob is the entry-count bound. It can be given directly, through an
`LruMapConfig`, or read from a table in a TOML file.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lrumap.errors import LruMapConfigError

logger = logging.getLogger("lrumap.config")

_KNOWN_KEYS = frozenset({"maximum_size"})


@dataclass(frozen=True)
class LruMapConfig:
    maximum_size: int | None = None

    def __post_init__(self) -> None:
        validate_maximum_size(self.maximum_size)


def validate_maximum_size(value: Any, *, name: str = "maximum_size") -> int | None:
    """Return `value` if it is a usable bound, else raise `LruMapConfigError`.

    `None` means unbounded. Zero and negative bounds are rejected rather than
    being treated as "always empty".
    """

    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise LruMapConfigError(f"Expected {name} to be an integer or None, got {value!r}.")
    if value < 1:
        raise LruMapConfigError(f"Invalid {name}: {value} (must be >= 1, or None for unbounded).")
    return value


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LruMapConfigError(f"Expected [{name}] to be a table.")
    return value


def config_from_mapping(data: Mapping[str, Any], *, name: str = "lru_map") -> LruMapConfig:
    """Validate a plain table such as `{"maximum_size": 128}`."""

    if not isinstance(data, Mapping):
        raise LruMapConfigError(f"Expected [{name}] to be a table.")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise LruMapConfigError(f"Unknown key(s) in [{name}]: {', '.join(map(str, unknown))}.")

    if "maximum_size" in data:
        maximum_size = validate_maximum_size(data["maximum_size"], name=f"{name}.maximum_size")
    else:
        maximum_size = None

    return LruMapConfig(maximum_size=maximum_size)


def load_config(config_path: Path, *, table: str = "lru_map") -> LruMapConfig:
    """Load an `LruMapConfig` from a TOML file.

    `table` may be dotted (`"tool.lrumap"`) to select a nested table, which
    makes it possible to keep the settings in a project's `pyproject.toml`.
    A file without the table yields the defaults.
    """

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise LruMapConfigError(f"Missing config file: {config_path}") from e
    except OSError as e:
        raise LruMapConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise LruMapConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise LruMapConfigError(f"Invalid TOML in {config_path}: {e}") from e

    current: dict[str, Any] = data
    walked: list[str] = []
    for part in table.split("."):
        walked.append(part)
        current = _as_table(current.get(part), name=".".join(walked))
        if not current:
            logger.debug("No [%s] table in %s; using defaults", table, config_path)
            return LruMapConfig()

    return config_from_mapping(current, name=table)
