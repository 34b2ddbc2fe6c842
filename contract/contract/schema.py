"""JSON-Schema conformance checks backed by ``jsonschema``.

A new validator is built for every check, so nothing a check leaves
behind can influence the next one.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft7Validator
from jsonschema.validators import validator_for

from contract.procedure import Schema


class SchemaChecker:
    """Answers "does this value conform to this schema?"."""

    def __init__(self, default_validator: type = Draft7Validator) -> None:
        self._default = default_validator

    def _validator_cls(self, schema: Schema) -> type:
        return validator_for(schema, default=self._default)

    def conforms(self, value: Any, schema: Schema) -> bool:
        """Return True if *value* validates against *schema*.

        Never raises for a non-conforming value.
        """
        validator = self._validator_cls(schema)(schema)
        return validator.is_valid(value)

    def check_schema(self, schema: Schema) -> None:
        """Raise ``jsonschema.SchemaError`` if *schema* itself is malformed."""
        self._validator_cls(schema).check_schema(schema)
