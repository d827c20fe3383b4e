"""
spec_validator – validate name/attributes/value/children item trees against a
compact, declarative specification.
"""
from .errors import (
    MalformedItemError,
    SchemaError,
    SpecificationError,
    UnknownIdentifierError,
    ValidationError,
    ValidationFailure,
)
from .model import AttributeSpec, ChildSpec, SchemaNode
from .normalizer import normalize
from .validator import TreeValidator, validate
from .config import Configuration, ValidatorConfig
from .loader import SchemaRepository, load_schema

__all__ = [
    "AttributeSpec",
    "ChildSpec",
    "Configuration",
    "MalformedItemError",
    "SchemaError",
    "SchemaNode",
    "SchemaRepository",
    "SpecificationError",
    "TreeValidator",
    "UnknownIdentifierError",
    "ValidationError",
    "ValidationFailure",
    "ValidatorConfig",
    "load_schema",
    "normalize",
    "validate",
]
