"""
validator.py - validate item trees against a normalized specification
=====================================================================

An *item* is a plain mapping::

    {"name": "foo", "value": ..., "attributes": {...}, "children": [item, ...]}

:class:`TreeValidator` walks the item depth-first in lock-step with its
normalized specification and stops at the first failure.  Failures are
results, not exceptions: :meth:`TreeValidator.is_valid` returns ``False`` and
the description is available from :attr:`TreeValidator.last_error`.

Only two things raise:

* a malformed specification (:class:`SchemaError`), at construction or when
  the walk reaches a key it does not know how to check.  Unknown keys are
  only looked at once every other check of that node has passed, so an item
  failing earlier (say on its name) is reported as invalid instead;
* an item, or a child item, that is not a mapping at all
  (:class:`MalformedItemError`).

Public API
----------
TreeValidator(specification, default_attr_spec=None, default_child_spec=None)
validate(item, *, schema, default_attr_spec=None, default_child_spec=None)
    One-shot helper raising :class:`ValidationError` on the first failure.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Dict, List, Mapping, NoReturn, Optional

from . import utils
from .errors import (
    MalformedItemError,
    SchemaError,
    SpecificationError,
    ValidationError,
    ValidationFailure,
)
from .config import ValidatorConfig
from .model import AttributeSpec, SchemaNode
from .normalizer import normalize

__all__ = ["TreeValidator", "validate"]

log = logging.getLogger(__name__)

_ITEM_KEYS = ("name", "value")


class _Failed(Exception):
    """Internal: unwinds the walk carrying the first failure."""

    def __init__(self, kind: SpecificationError, message: str):
        super().__init__(message)
        self.failure = ValidationFailure(kind, message)


def _fail(kind: SpecificationError, message: str) -> NoReturn:
    raise _Failed(kind, message)


class TreeValidator:
    """Check item trees against one specification.

    The specification is copied and normalized once, here, so later changes
    to the caller's dictionary do not affect this validator.  An instance
    keeps only the most recent failure; give each thread its own instance.

    An item without an ``attributes`` key is checked as if it carried an empty
    mapping, so it fails with ``MISSING_ATTRIBUTE`` for the first required
    attribute (or passes when none is required).  ``NO_ATTRIBUTES`` is kept
    for an ``attributes`` value that is not a mapping at all, ``None`` included.
    """

    def __init__(
        self,
        specification: Mapping[str, Any],
        default_attr_spec: Optional[Mapping[str, Any]] = None,
        default_child_spec: Optional[Mapping[str, Any]] = None,
    ):
        self.__schema = normalize(
            copy.deepcopy(specification), default_attr_spec, default_child_spec
        )
        self.__last: Optional[ValidationFailure] = None
        self.__lock = threading.Lock()

    @classmethod
    def from_config(cls, specification: Mapping[str, Any], config: ValidatorConfig) -> "TreeValidator":
        """Build a validator using the defaults held by a ``ValidatorConfig``."""
        return cls(specification, config.default_attr_spec, config.default_child_spec)

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    @property
    def schema(self) -> SchemaNode:
        return self.__schema

    @property
    def last_error(self) -> Optional[str]:
        """Description of the failure found by the last call, if any."""
        return self.__last.message if self.__last is not None else None

    @property
    def last_failure(self) -> Optional[ValidationFailure]:
        return self.__last

    def is_valid(self, item: Mapping[str, Any]) -> bool:
        with self.__lock:
            self.__last = None
            try:
                self._check(item, self.__schema)
            except _Failed as exc:
                self.__last = exc.failure
                log.debug("Item rejected (%s): %s", exc.failure.kind.name, exc.failure.message)
                return False
            return True

    # ------------------------------------------------------------------ #
    # Recursive walk                                                     #
    # ------------------------------------------------------------------ #

    def _check(self, item: Any, spec: SchemaNode) -> None:
        if not isinstance(item, Mapping):
            raise MalformedItemError(f"Item has to be a mapping, got {type(item).__name__}")

        # 1) unknown fields ---------------------------------------------------
        allowed = set(_ITEM_KEYS)
        if spec.attributes is not None:
            allowed.add("attributes")
        if spec.children is not None:
            allowed.add("children")
        unknown = [str(k) for k in item if k not in allowed]
        if unknown:
            _fail(SpecificationError.UNSPECIFIED_FIELDS,
                  "Item has unspecified fields: " + ",".join(unknown))

        # 2) name -------------------------------------------------------------
        if spec.name is not None and not utils.strict_equals(item.get("name"), spec.name):
            _fail(SpecificationError.WRONG_NAME, f"Item does not have name equal {spec.name}")

        # 3) attributes -------------------------------------------------------
        if spec.attributes is not None:
            self._check_attributes(item.get("attributes", {}), spec.attributes)

        # 4) children ---------------------------------------------------------
        if spec.children is not None:
            self._check_children(item, spec)

        # 5) emptiness --------------------------------------------------------
        if item.get("value") is None and not item.get("attributes") and not item.get("children"):
            _fail(SpecificationError.EMPTY_ITEM, f"Item {item.get('name')} is empty but cannot be")

        # 6) keys the walk does not know how to check ------------------------
        if spec.extra:
            key = next(iter(spec.extra))
            raise SchemaError(f"Unsupported check for key {key} in specification")

    def _check_attributes(self, attrs: Any, specs: Mapping[str, AttributeSpec]) -> None:
        if not isinstance(attrs, Mapping):
            _fail(SpecificationError.NO_ATTRIBUTES, "Item does not have attributes")

        unknown = [str(k) for k in attrs if k not in specs]
        if unknown:
            _fail(SpecificationError.UNSPECIFIED_ATTRIBUTES,
                  "Item has unspecified attributes: " + ",".join(unknown))

        for name, spec in specs.items():
            value = attrs.get(name)
            if value is None:
                if spec.required:
                    _fail(SpecificationError.MISSING_ATTRIBUTE,
                          f"Item does not have required attribute {name}")
                continue
            self._check_attribute(name, value, spec)

    @staticmethod
    def _check_attribute(name: str, value: Any, spec: AttributeSpec) -> None:
        # an enum decides on its own; type and length are not looked at
        if spec.enum is not None:
            if not any(utils.strict_equals(value, literal) for literal in spec.enum):
                _fail(SpecificationError.INVALID_ENUM,
                      f"Attribute {name} value ({value}) does not satisfy enum constraint")
        elif spec.type == "string" and spec.max_length is not None:
            length = utils.char_length(value)
            if length > spec.max_length:
                _fail(SpecificationError.TOO_LONG_ATTRIBUTE,
                      f"Attribute {name} length exceeded max {spec.max_length} and is {length}")
        elif spec.type == "date" and spec.date_format is not None:
            if not utils.matches_date_format(value, spec.date_format):
                _fail(SpecificationError.INVALID_DATE_FORMAT,
                      f"Attribute {name} value ({value}) is not valid date in format {spec.date_format}")
        elif spec.type == "integer":
            if not utils.is_integer_like(value):
                _fail(SpecificationError.NOT_INTEGER,
                      f"Attribute {name} value ({value}) is not an integer")

    def _check_children(self, item: Mapping[str, Any], spec: SchemaNode) -> None:
        if "children" not in item:
            if spec.may_be_childless:
                return
            _fail(SpecificationError.MISSING_CHILDREN,
                  f"Item {item.get('name')} cannot be empty but has no children")

        children = item["children"]
        if not isinstance(children, (list, tuple)):
            _fail(SpecificationError.MALFORMED_ITEM_DATA,
                  f"Item {item.get('name')} has children but they are not a list")

        found: Dict[str, List[Any]] = {}
        for child in children:
            if not isinstance(child, Mapping):
                raise MalformedItemError(
                    f"Child of item {item.get('name')} has to be a mapping, got {type(child).__name__}"
                )
            name = child.get("name")
            if not isinstance(name, str) or name not in spec.children:
                _fail(SpecificationError.UNSPECIFIED_CHILD, f"Item has unspecified child named {name}")
            self._check(child, spec.children[name].schema)
            found[name] = child.get("children") or []

        for name, child_spec in spec.children.items():
            if name not in found:
                if child_spec.required:
                    _fail(SpecificationError.MISSING_CHILD, f"Child {name} is required but not found")
                continue
            if (
                not found[name]
                and not child_spec.may_be_childless
                and child_spec.schema.children is not None
            ):
                _fail(SpecificationError.CHILDLESS_CHILD,
                      f"Child {name} cannot be childless but has no children")

        if not children and not spec.may_be_childless:
            _fail(SpecificationError.MISSING_CHILDREN,
                  f"Item {item.get('name')} has no children but cannot be childless")


def validate(
    item: Mapping[str, Any],
    *,
    schema: Mapping[str, Any],
    default_attr_spec: Optional[Mapping[str, Any]] = None,
    default_child_spec: Optional[Mapping[str, Any]] = None,
) -> None:
    """Assert that *item* satisfies *schema*, raising :class:`ValidationError`."""
    checker = TreeValidator(schema, default_attr_spec, default_child_spec)
    if not checker.is_valid(item):
        raise ValidationError(checker.last_failure)
