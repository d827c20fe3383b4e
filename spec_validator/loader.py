"""
loader.py - read specifications from disk and keep validators warm
===================================================================

Public API
----------
load_schema(path) : read a JSON specification, returning a fresh copy
SchemaRepository  : path -> TreeValidator cache with time-based reloads
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import TimeCachedResultHolder
from .config import ValidatorConfig
from .validator import TreeValidator

__all__ = ["load_schema", "SchemaRepository"]

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _read(path: Path) -> Any:
    """Read & parse a JSON specification, raising crisp errors on failure."""
    try:
        with path.open(encoding="utf-8") as fd:
            return json.load(fd)
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Schema not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


# --------------------------------------------------------------------------- #
# Public utilities                                                            #
# --------------------------------------------------------------------------- #

def load_schema(path: str | Path) -> dict:
    """Load the specification stored at *path*.

    Raises ``FileNotFoundError`` when the file is missing and ``ValueError``
    when it is not valid JSON or does not hold a JSON object.
    """
    p = Path(path)
    data = _read(p)
    if not isinstance(data, dict):
        raise ValueError(f"Schema at '{p}' has to be a JSON object, got {type(data).__name__}")
    return copy.deepcopy(data)


class SchemaRepository(TimeCachedResultHolder):
    """Hand out one :class:`TreeValidator` per specification file.

    Validators are rebuilt from disk once they are older than
    ``config.cache_refresh_time`` seconds.  Like the validators themselves, a
    repository is meant to be used from a single thread.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None):
        super().__init__()
        self.config = config or ValidatorConfig()
        self.cache_refresh_time = self.config.cache_refresh_time
        self._validators: Dict[Path, TreeValidator] = {}

    def get(self, path: str | Path) -> TreeValidator:
        key = Path(path).resolve()
        if key in self._validators and not self._is_time_to_refresh(key):
            return self._validators[key]

        if key in self._validators:
            log.info("Reloading specification %s", key)
        validator = TreeValidator.from_config(load_schema(key), self.config)
        self._validators[key] = validator
        self._update_cache_time(key)
        return validator

    def clear(self) -> None:
        self._validators.clear()
        self._forget_cache_time()
