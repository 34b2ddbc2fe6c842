"""Example procedures.

All procedures are registered on the module-level ``registry`` which the
server uses when no other procedures are supplied.
"""

from __future__ import annotations

from typing import Any

from contract.procedure import Outcome, ProcedureRegistry


registry = ProcedureRegistry()

_OPERANDS = {
    "type": "object",
    "required": ["a", "b"],
    "properties": {
        "a": {"type": "number"},
        "b": {"type": "number"},
    },
}


@registry.procedure(
    "add",
    description="Add two numbers.",
    parameters=_OPERANDS,
    result={"type": "number"},
)
async def add(context: dict, params: dict) -> Outcome:
    return Outcome.ok(params["a"] + params["b"])


@registry.procedure(
    "divide",
    description="Divide a by b.",
    parameters=_OPERANDS,
    result={"type": "number"},
    errors={"EDIVZERO"},
)
async def divide(context: dict, params: dict) -> Outcome:
    if params["b"] == 0:
        return Outcome.fail("EDIVZERO", "Division by zero.")
    return Outcome.ok(params["a"] / params["b"])


class Echo:
    """Returns its parameters unchanged."""

    schema = {"type": ["array", "object", "null"]}

    def description(self) -> str:
        return "Return the parameters unchanged."

    def parameters(self) -> dict[str, Any]:
        return self.schema

    def result(self) -> dict[str, Any]:
        return self.schema

    def errors(self) -> set[str]:
        return set()

    def execute(self, context: dict, params: Any) -> Outcome:
        return Outcome.ok(params)


registry.add("echo", Echo())
