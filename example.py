"""
example.py - validating an order document with spec-validator
==============================================================

This example walks through the typical workflow:

1. **Declare the specification** in the compact shorthand (or load it from a
   JSON file with :func:`spec_validator.load_schema`).
2. **Build a validator** once; the specification is normalized up front and a
   broken specification fails right here with ``SchemaError``.
3. **Validate items**; failures are results, read from ``last_error``.
"""
from __future__ import annotations

import logging

from spec_validator import SchemaError, TreeValidator

# --------------------------------------------------------------------------- #
# Logging Configuration                                                       #
# --------------------------------------------------------------------------- #
logging.basicConfig(
    level="INFO",
    format="%(asctime)s %(levelname)s %(message)s",
)
log = logging.getLogger("spec_validator.examples")

# --------------------------------------------------------------------------- #
# Step 1: Declare the Specification                                           #
# --------------------------------------------------------------------------- #
ORDER_SPEC = {
    "name": "order",
    "attributes": {
        "_default_": {"maxLength": 40},
        "number": {"type": "integer"},
        "placed": {"type": "date", "dateFormat": "%Y-%m-%d"},
        "status": {"enum": ["new", "paid", "shipped"]},
        "note": {"required": False},
    },
    "children": {
        "lines": {
            "children": {
                "line": {"attributes": ["sku", {"qty": {"type": "integer"}}]},
            },
        },
        "comment": {"required": False},
    },
}

# --------------------------------------------------------------------------- #
# Step 2: Build the Validator                                                 #
# --------------------------------------------------------------------------- #
try:
    checker = TreeValidator(ORDER_SPEC)
except SchemaError as exc:
    log.error("Broken specification: %s", exc)
    raise

# --------------------------------------------------------------------------- #
# Step 3: Validate Items                                                      #
# --------------------------------------------------------------------------- #
good = {
    "name": "order",
    "attributes": {"number": "1024", "placed": "2025-06-07", "status": "paid"},
    "children": [
        {"name": "lines", "children": [
            {"name": "line", "attributes": {"sku": "A-1", "qty": 2}},
            {"name": "line", "attributes": {"sku": "B-7", "qty": "1"}},
        ]},
        {"name": "comment", "value": "leave at the door"},
    ],
}

bad = {
    "name": "order",
    "attributes": {"number": "1025", "placed": "07.06.2025", "status": "paid"},
    "children": [],
}

for label, doc in (("good", good), ("bad", bad)):
    if checker.is_valid(doc):
        log.info("%s order is valid", label)
    else:
        log.warning("%s order rejected [%s]: %s", label, checker.last_failure.kind.name, checker.last_error)
