"""
config.py - settings objects with copy-and-merge semantics
==========================================================

Subclass :class:`Configuration` and declare every setting as a class
attribute holding its default::

    class MyConfig(Configuration):
        host = "localhost"
        port = 8080

``MyConfig({"port": 9090, "unknown": 1})`` keeps only the declared settings;
``None`` values are skipped unless ``allow_nulls=True``.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

__all__ = ["Configuration", "ValidatorConfig"]


class Configuration:
    """Base class for flat, declared-settings-only configuration objects."""

    def __init__(self, settings: Optional[Mapping[str, Any]] = None, allow_nulls: bool = False):
        for key in self._settings():
            setattr(self, key, copy.deepcopy(getattr(type(self), key)))
        for key, value in (settings or {}).items():
            if (allow_nulls or value is not None) and self._declares(key):
                setattr(self, key, value)

    @classmethod
    def _settings(cls) -> Tuple[str, ...]:
        """Names of the declared settings, in declaration order (base first)."""
        names: Dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            if klass is object or not issubclass(klass, Configuration):
                continue
            for key, value in vars(klass).items():
                if key.startswith("_") or callable(value) or isinstance(value, (classmethod, staticmethod, property)):
                    continue
                names[key] = None
        return tuple(names)

    @classmethod
    def _declares(cls, key: Any) -> bool:
        return isinstance(key, str) and key in cls._settings()

    def to_dict(self, not_null: bool = False) -> Dict[str, Any]:
        """Return the settings as a dict, optionally dropping ``None`` values."""
        out = {key: getattr(self, key) for key in self._settings()}
        if not_null:
            return {k: v for k, v in out.items() if v is not None}
        return out

    def equals(self, other: Any) -> bool:
        """Tell if *other* holds all and only identical settings.

        *other* must be a configuration of the same class or a mapping; values
        are compared type-sensitively, so ``1`` and ``"1"`` (or ``True``)
        differ.
        """
        if isinstance(other, type(self)):
            if other is self:
                return True
            other = other.to_dict()
        elif not isinstance(other, Mapping):
            return False

        mine = self.to_dict()
        if len(mine) != len(other):
            return False
        return all(
            key in other and type(value) is type(other[key]) and value == other[key]
            for key, value in mine.items()
        )

    def merge_copy_with(self, other: Any, not_null: bool = True) -> "Configuration":
        """Return a copy of this configuration with the settings of *other* laid over it.

        *other* may be another :class:`Configuration`, a mapping, an iterable of
        ``(key, value)`` pairs, or any object supporting ``other[key]``.
        Undeclared keys are ignored; with *not_null* ``None`` values are too.
        """
        result = copy.deepcopy(self)
        if other is self:
            return result

        pairs: Iterable[Tuple[Any, Any]]
        if isinstance(other, Configuration):
            pairs = other.to_dict(not_null).items()
        elif isinstance(other, Mapping):
            pairs = other.items()
        elif hasattr(other, "__getitem__") and not isinstance(other, (str, bytes, list, tuple)):
            pairs = [(key, _item_or_none(other, key)) for key in self._settings()]
            pairs = [(k, v) for k, v in pairs if v is not None]
        elif isinstance(other, Iterable) and not isinstance(other, (str, bytes)):
            pairs = other
        else:
            raise TypeError("Invalid type of param other")

        for key, value in pairs:
            if (not not_null or value is not None) and self._declares(key):
                setattr(result, key, copy.deepcopy(value))
        return result

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{type(self).__name__}({inner})"


def _item_or_none(container: Any, key: str) -> Any:
    try:
        return container[key]
    except (KeyError, IndexError, TypeError):
        return None


class ValidatorConfig(Configuration):
    """Defaults shared by every validator built through a :class:`~spec_validator.loader.SchemaRepository`."""

    default_attr_spec: Optional[Dict[str, Any]] = None
    default_child_spec: Optional[Dict[str, Any]] = None
    cache_refresh_time: int = 60
