"""
errors.py - failure taxonomy and exception classes
===================================================

Two disjoint kinds of problems exist in this package:

* **schema defects** - the specification itself is broken.  These are
  programmer errors and are raised as :class:`SchemaError`.
* **validation failures** - the item tree does not satisfy a correct
  specification.  These are ordinary results, described by a
  :class:`ValidationFailure` whose ``kind`` is a :class:`SpecificationError`.

Public API
----------
SpecificationError
    Closed enumeration of every validation failure kind.
ValidationFailure
    ``(kind, message)`` record of the first failure found.
SchemaError, MalformedItemError, ValidationError, UnknownIdentifierError
    Exception classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Union

__all__ = [
    "SpecificationError",
    "ValidationFailure",
    "SchemaError",
    "MalformedItemError",
    "ValidationError",
    "UnknownIdentifierError",
]

# --------------------------------------------------------------------------- #
# Exceptions                                                                  #
# --------------------------------------------------------------------------- #

class SchemaError(ValueError):
    """Raised when a specification is malformed (never for bad item data)."""


class MalformedItemError(TypeError):
    """Raised when an item is not a mapping where one is mandatory."""


class UnknownIdentifierError(LookupError):
    """Raised when a taxonomy lookup matches neither a name nor a value."""


class ValidationError(ValueError):
    """Raised by :func:`spec_validator.validator.validate` for invalid items."""

    def __init__(self, failure: "ValidationFailure"):
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> "SpecificationError":
        return self.failure.kind


# --------------------------------------------------------------------------- #
# Failure taxonomy                                                            #
# --------------------------------------------------------------------------- #

class SpecificationError(IntEnum):
    """Every way an item tree can fail validation."""

    UNSPECIFIED_FIELDS = 1
    WRONG_NAME = 2
    NO_ATTRIBUTES = 3
    UNSPECIFIED_ATTRIBUTES = 4
    MISSING_ATTRIBUTE = 5
    INVALID_ENUM = 6
    TOO_LONG_ATTRIBUTE = 7
    INVALID_DATE_FORMAT = 8
    NOT_INTEGER = 9
    MISSING_CHILDREN = 10
    MALFORMED_ITEM_DATA = 11
    UNSPECIFIED_CHILD = 12
    MISSING_CHILD = 13
    CHILDLESS_CHILD = 14
    EMPTY_ITEM = 15

    @classmethod
    def as_dict(cls) -> Dict[str, int]:
        """Return a ``name -> value`` mapping of all members."""
        return dict(_BY_NAME)

    @classmethod
    def is_known(cls, needle: Union[str, int]) -> bool:
        """Tell whether *needle* is a member name or a member value."""
        _check_needle(needle)
        return needle in _BY_NAME or needle in _BY_VALUE

    @classmethod
    def lookup(cls, needle: Union[str, int]) -> "SpecificationError":
        """Return the member named *needle*, or else the one valued *needle*."""
        _check_needle(needle)
        if needle in _BY_NAME:
            return cls[needle]
        if needle in _BY_VALUE:
            return _BY_VALUE[needle]
        raise UnknownIdentifierError(
            f'There is no constant that matches to "{needle}" in {cls.__name__}'
        )


_BY_NAME: Dict[str, int] = {m.name: m.value for m in SpecificationError}
_BY_VALUE: Dict[int, SpecificationError] = {m.value: m for m in SpecificationError}


def _check_needle(needle: object) -> None:
    if isinstance(needle, bool) or not isinstance(needle, (str, int)):
        raise TypeError("Invalid param needle")


@dataclass(frozen=True)
class ValidationFailure:
    """The first failure found while validating an item tree."""

    kind: SpecificationError
    message: str

    def __str__(self) -> str:
        return self.message
