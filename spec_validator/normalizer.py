"""
normalizer.py - expand a shorthand specification into canonical records
=======================================================================

Specifications are written in a compact, JSON-friendly shorthand::

    {
        "name": "foo",
        "attributes": {
            "_default_": {"maxLength": 10},
            "plain": {},
            "kind": {"enum": ["a", "b"]},
            "size": {"type": "integer", "required": False},
        },
        "children": {
            "bars": {"required": False, "children": ["bar"]},
        },
    }

``attributes`` and ``children`` may also be lists mixing bare names
(``"bar"``) and one-entry mappings (``{"bar": {...}}``).  A bare name takes
the default spec unchanged.

Public API
----------
normalize(raw, default_attr_spec=None, default_child_spec=None) -> SchemaNode
merge_defaults(base, override) -> dict
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from .errors import SchemaError
from .model import ATTRIBUTE_TYPES, AttributeSpec, ChildSpec, SchemaNode

__all__ = [
    "BASE_ATTR_SPEC",
    "BASE_CHILD_SPEC",
    "DEFAULT_KEY",
    "merge_defaults",
    "normalize",
]

log = logging.getLogger(__name__)

BASE_ATTR_SPEC: Mapping[str, Any] = {"required": True, "type": "string"}
BASE_CHILD_SPEC: Mapping[str, Any] = {"required": True, "mayBeChildless": False}

# reserved pseudo-attribute holding per-specification attribute defaults
DEFAULT_KEY = "_default_"

_ATTR_KEYS = frozenset({"required", "type", "maxLength", "enum", "dateFormat"})
_ATTR_ALIASES = {"format": "dateFormat"}
_NODE_KEYS = frozenset({"name", "attributes", "children", "mayBeChildless", "required"})

_BARE = object()  # marks an entry given only by its name

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def merge_defaults(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a copy of *base* with the keys of *override* laid over it."""
    out = dict(base)
    if override:
        out.update(override)
    return out


def _canonical_attr(spec: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename alias keys, letting the canonical key win when both appear."""
    out: Dict[str, Any] = {}
    for key, value in spec.items():
        canonical = _ATTR_ALIASES.get(key, key)
        if canonical != key and canonical in spec:
            continue
        out[canonical] = value
    return out


def _require_bool(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise SchemaError(f'Constraint "{what}" has to be a boolean, got {value!r}')
    return value


def _entries(value: Any, key: str) -> List[Tuple[str, Any]]:
    """Flatten the mapping or list shorthand into ``(name, spec)`` pairs."""
    pairs: List[Tuple[Any, Any]]
    if isinstance(value, Mapping):
        pairs = list(value.items())
    elif isinstance(value, (list, tuple)):
        pairs = []
        for element in value:
            if isinstance(element, str):
                pairs.append((element, _BARE))
            elif isinstance(element, Mapping):
                pairs.extend(element.items())
            else:
                raise SchemaError(f"Invalid entry under key {key}: {element!r}")
    else:
        raise SchemaError(f"Value under key {key} has to be a mapping or a list")

    for name, spec in pairs:
        if not isinstance(name, str):
            raise SchemaError(f"Names under key {key} have to be strings, got {name!r}")
        if spec is not _BARE and not isinstance(spec, Mapping):
            if key == "attributes":
                raise SchemaError(f"Attribute specification for {name} has to be a mapping")
            raise SchemaError(f"Invalid child specification for key {name}")
    return pairs


def _attribute(name: str, spec: Mapping[str, Any]) -> AttributeSpec:
    """Check a fully merged attribute spec and freeze it."""
    unknown = sorted(set(spec) - _ATTR_KEYS)
    if unknown:
        raise SchemaError(f"Attribute {name} has unsupported constraints: {unknown}")

    atype = spec.get("type")
    if atype not in ATTRIBUTE_TYPES:
        raise SchemaError(f"Attribute {name} has unsupported type {atype!r}; expected one of {list(ATTRIBUTE_TYPES)}")

    max_length = spec.get("maxLength")
    if max_length is not None and (
        isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 1
    ):
        raise SchemaError('Attribute constraint "maxLength" has to be an integer >= 1')

    enum = spec.get("enum")
    if enum is not None and (not isinstance(enum, (list, tuple)) or not enum):
        raise SchemaError('Attribute constraint "enum" has to be a non-empty list')

    date_format = spec.get("dateFormat")
    if date_format is not None and not isinstance(date_format, str):
        raise SchemaError('Attribute constraint "dateFormat" has to be a string')

    return AttributeSpec(
        required=_require_bool(spec.get("required"), "required"),
        type=atype,
        max_length=max_length,
        enum=tuple(enum) if enum is not None else None,
        date_format=date_format,
    )


# --------------------------------------------------------------------------- #
# Recursive normalizer                                                        #
# --------------------------------------------------------------------------- #

class _Normalizer:
    def __init__(self, child_default: Mapping[str, Any]):
        self.child_default = child_default
        self._active: Set[int] = set()

    def node(self, raw: Any, attr_default: Mapping[str, Any]) -> SchemaNode:
        if not isinstance(raw, Mapping):
            raise SchemaError(f"Specification has to be a mapping, got {type(raw).__name__}")
        if id(raw) in self._active:
            raise SchemaError("Specification refers to itself; recursive schemas are not supported")
        self._active.add(id(raw))
        try:
            return self._build(raw, attr_default)
        finally:
            self._active.discard(id(raw))

    def _build(self, raw: Mapping[str, Any], attr_default: Mapping[str, Any]) -> SchemaNode:
        extra = {k: v for k, v in raw.items() if k not in _NODE_KEYS}

        # 1) attributes, with the optional local `_default_` ------------------
        attributes: Optional[Dict[str, AttributeSpec]] = None
        if "attributes" in raw:
            entries = _entries(raw["attributes"], "attributes")
            for name, spec in entries:
                if name == DEFAULT_KEY:
                    if spec is _BARE:
                        raise SchemaError(f"{DEFAULT_KEY} has to be given as a mapping")
                    attr_default = merge_defaults(attr_default, _canonical_attr(spec))

            attributes = {}
            for name, spec in entries:
                if name == DEFAULT_KEY:
                    continue
                merged = attr_default if spec is _BARE else merge_defaults(attr_default, _canonical_attr(spec))
                attributes[name] = _attribute(name, merged)

        # 2) children ---------------------------------------------------------
        children: Optional[Dict[str, ChildSpec]] = None
        fallback: Optional[bool] = None
        if "children" in raw:
            children = {}
            for name, child_raw in _entries(raw["children"], "children"):
                if child_raw is _BARE:
                    childless = self.child_default["mayBeChildless"]
                    child = ChildSpec(
                        required=self.child_default["required"],
                        may_be_childless=childless,
                        schema=SchemaNode(may_be_childless=childless),
                    )
                else:
                    sub = self.node(child_raw, attr_default)
                    required = child_raw.get("required", self.child_default["required"])
                    child = ChildSpec(
                        required=_require_bool(required, "required"),
                        may_be_childless=sub.may_be_childless,
                        schema=sub,
                    )
                children[name] = child
                # once a child refuses to be childless, later ones cannot flip it
                if fallback is not False:
                    fallback = child.may_be_childless

        # 3) own mayBeChildless ----------------------------------------------
        if "mayBeChildless" in raw:
            may_be_childless = _require_bool(raw["mayBeChildless"], "mayBeChildless")
        elif fallback is not None:
            may_be_childless = fallback
        else:
            may_be_childless = self.child_default["mayBeChildless"]

        return SchemaNode(
            name=raw.get("name"),
            attributes=attributes,
            children=children,
            may_be_childless=may_be_childless,
            extra=extra,
        )


# --------------------------------------------------------------------------- #
# Public entry point                                                          #
# --------------------------------------------------------------------------- #

def normalize(
    raw: Any,
    default_attr_spec: Optional[Mapping[str, Any]] = None,
    default_child_spec: Optional[Mapping[str, Any]] = None,
) -> SchemaNode:
    """Convert a shorthand specification into a canonical :class:`SchemaNode`.

    *default_attr_spec* and *default_child_spec* are laid over
    :data:`BASE_ATTR_SPEC` and :data:`BASE_CHILD_SPEC`.  A ``_default_``
    entry under ``attributes`` is laid over the attribute default for that
    node and everything below it.  An already canonical :class:`SchemaNode`
    normalizes to an equal node.

    Raises
    ------
    SchemaError
        If the specification or one of the defaults is malformed.
    """
    if isinstance(raw, SchemaNode):
        raw = raw.to_dict()

    attr_default = merge_defaults(BASE_ATTR_SPEC, _canonical_attr(default_attr_spec or {}))
    child_default = merge_defaults(BASE_CHILD_SPEC, default_child_spec)
    unknown = sorted(set(child_default) - set(BASE_CHILD_SPEC))
    if unknown:
        raise SchemaError(f"Default child spec has unsupported keys: {unknown}")
    for key in BASE_CHILD_SPEC:
        _require_bool(child_default[key], key)

    node = _Normalizer(child_default).node(raw, attr_default)
    log.debug("Normalized specification %r", node.name)
    return node
