"""
model.py - canonical (normalized) specification records
========================================================

These frozen records are what :func:`spec_validator.normalizer.normalize`
produces and what :class:`spec_validator.validator.TreeValidator` walks.
Each one can be turned back into the raw dictionary form with ``to_dict()``;
normalizing that output again yields an equal record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

__all__ = ["ATTRIBUTE_TYPES", "AttributeSpec", "ChildSpec", "SchemaNode"]

ATTRIBUTE_TYPES = ("string", "integer", "date")


@dataclass(frozen=True)
class AttributeSpec:
    """Constraints for a single attribute of an item."""

    required: bool = True
    type: str = "string"
    max_length: Optional[int] = None
    enum: Optional[Tuple[Any, ...]] = None
    date_format: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"required": self.required, "type": self.type}
        if self.max_length is not None:
            out["maxLength"] = self.max_length
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.date_format is not None:
            out["dateFormat"] = self.date_format
        return out


@dataclass(frozen=True)
class SchemaNode:
    """Normalized shape of one item.

    ``attributes`` and ``children`` are ``None`` when the specification does
    not declare them at all, which is not the same as declaring them empty.
    """

    name: Optional[str] = None
    attributes: Optional[Mapping[str, AttributeSpec]] = None
    children: Optional[Mapping[str, "ChildSpec"]] = None
    may_be_childless: bool = False
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.name is not None:
            out["name"] = self.name
        out.update(self.extra)
        if self.attributes is not None:
            out["attributes"] = {k: a.to_dict() for k, a in self.attributes.items()}
        if self.children is not None:
            out["children"] = {k: c.to_dict() for k, c in self.children.items()}
        out["mayBeChildless"] = self.may_be_childless
        return out


@dataclass(frozen=True)
class ChildSpec:
    """A declared child: how often it must appear, plus its own shape."""

    required: bool = True
    may_be_childless: bool = False
    schema: SchemaNode = field(default_factory=SchemaNode)

    def to_dict(self) -> Dict[str, Any]:
        out = self.schema.to_dict()
        out["required"] = self.required
        out["mayBeChildless"] = self.may_be_childless
        return out
