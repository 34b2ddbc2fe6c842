"""Procedure contract and the ``Outcome`` value procedures return.

A procedure is anything that provides the five methods of ``Procedure``;
no base class is required.  ``FunctionProcedure`` and ``ProcedureRegistry``
are conveniences for declaring procedures from plain functions::

    registry = ProcedureRegistry()

    @registry.procedure(
        "add",
        description="Add two numbers.",
        parameters={"type": "object", "required": ["a", "b"], ...},
        result={"type": "number"},
    )
    def add(context, params):
        return Outcome.ok(params["a"] + params["b"])
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, Union, runtime_checkable

log = logging.getLogger(__name__)

# A JSON-Schema document as decoded from JSON (``True``/``False`` included).
Schema = Union[Mapping[str, Any], bool]


# ── Outcome ──────────────────────────────────────────────────────────
@dataclass(frozen=True, slots=True)
class Outcome:
    """Either a successful result or an error code, never both.

    On failure ``value`` holds the optional diagnostic detail, which the
    renderer only exposes in debug mode.  Build instances through
    ``ok``/``fail``.
    """

    value: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, result: Any = None) -> "Outcome":
        return cls(value=result)

    @classmethod
    def fail(cls, code: str, detail: Any = None) -> "Outcome":
        if not isinstance(code, str) or not code:
            raise ValueError("error code must be a non-empty string")
        return cls(value=detail, error=code)

    @property
    def failed(self) -> bool:
        return self.error is not None


# ── Contract ─────────────────────────────────────────────────────────
@runtime_checkable
class Procedure(Protocol):
    """Capability set every registered procedure provides."""

    def description(self) -> str: ...

    def parameters(self) -> Schema: ...

    def result(self) -> Schema: ...

    def errors(self) -> set[str]: ...

    def execute(
        self, context: Mapping[str, Any], parameters: Any
    ) -> Outcome | Awaitable[Outcome]: ...


ExecuteFn = Callable[[Mapping[str, Any], Any], Union[Outcome, Awaitable[Outcome]]]


@dataclass(frozen=True)
class FunctionProcedure:
    """Adapts a plain or async callable into a ``Procedure``."""

    fn: ExecuteFn
    parameters_schema: Schema = True
    result_schema: Schema = True
    declared_errors: frozenset[str] = field(default_factory=frozenset)
    summary: str = ""

    def description(self) -> str:
        return self.summary or (self.fn.__doc__ or "").strip()

    def parameters(self) -> Schema:
        return self.parameters_schema

    def result(self) -> Schema:
        return self.result_schema

    def errors(self) -> set[str]:
        return set(self.declared_errors)

    def execute(self, context: Mapping[str, Any], parameters: Any):
        return self.fn(context, parameters)


class ProcedureRegistry:
    """Name -> procedure mapping populated at configuration time."""

    def __init__(self) -> None:
        self._procedures: dict[str, Procedure] = {}

    # -- Registration --------------------------------------------------
    def add(self, name: str, proc: Procedure) -> None:
        if name in self._procedures:
            raise ValueError(f"procedure {name!r} is already registered")
        self._procedures[name] = proc
        log.debug("registered procedure %r -> %s", name, type(proc).__qualname__)

    def procedure(
        self,
        name: str,
        *,
        description: str = "",
        parameters: Schema = True,
        result: Schema = True,
        errors: Iterable[str] = (),
    ) -> Callable[[ExecuteFn], ExecuteFn]:
        """Decorator that registers *fn* under *name*."""

        def decorator(fn: ExecuteFn) -> ExecuteFn:
            self.add(
                name,
                FunctionProcedure(
                    fn=fn,
                    parameters_schema=parameters,
                    result_schema=result,
                    declared_errors=frozenset(errors),
                    summary=description,
                ),
            )
            return fn

        return decorator

    # -- Introspection -------------------------------------------------
    def as_mapping(self) -> dict[str, Procedure]:
        return dict(self._procedures)

    @property
    def names(self) -> list[str]:
        return list(self._procedures)

    def __contains__(self, name: object) -> bool:
        return name in self._procedures

    def __len__(self) -> int:
        return len(self._procedures)
