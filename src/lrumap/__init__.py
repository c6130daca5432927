from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from lrumap.config import LruMapConfig, config_from_mapping, load_config, validate_maximum_size
from lrumap.errors import LruMapConfigError, LruMapError
from lrumap.lru_map import LruItemsView, LruKeysView, LruMap, LruValuesView


def _package_version() -> str:
    try:
        return version("lrumap")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "LruItemsView",
    "LruKeysView",
    "LruMap",
    "LruMapConfig",
    "LruMapConfigError",
    "LruMapError",
    "LruValuesView",
    "__version__",
    "config_from_mapping",
    "load_config",
    "validate_maximum_size",
]
