"""Procedure dispatch.

Resolves a method name to a registered procedure, checks the parameters
against the procedure's declared schema and runs it.  In debug mode the
outcome is additionally audited against what the procedure declares it
may return.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Mapping
from typing import Any

from anyio import to_thread

from contract.errors import EERROR, EINTRN, EPARAM, EREQST, ERESLT, is_standard
from contract.procedure import Outcome, Procedure
from contract.schema import SchemaChecker
from gateway.config import ServerConfig

log = logging.getLogger(__name__)


class Dispatcher:
    """Runs procedures from a ``ServerConfig``.

    Usage::

        dispatcher = Dispatcher(ServerConfig(procedures={"add": Add()}))
        outcome = await dispatcher.execute_procedure({}, "add", {"a": 1, "b": 2})
    """

    def __init__(self, config: ServerConfig, checker: SchemaChecker | None = None) -> None:
        self._config = config
        self._checker = checker or SchemaChecker()

    @property
    def debug(self) -> bool:
        return self._config.debug

    # -- Dispatch ------------------------------------------------------
    async def execute_procedure(
        self, context: Mapping[str, Any], method: str, parameters: Any
    ) -> Outcome:
        proc = self._config.procedures.get(method)
        if proc is None:
            log.info("unknown method %r", method)
            return Outcome.fail(EREQST, self._hint(f'Method "{method}" does not exist.'))

        if not self._checker.conforms(parameters, proc.parameters()):
            log.info("rejected parameters for %r", method)
            return Outcome.fail(EPARAM, self._hint("Invalid, missing or unsupported parameter."))

        outcome = await self._invoke(proc, method, context, parameters)

        if self.debug:
            outcome = self._audit(proc, method, outcome)
        return outcome

    # -- Helpers -------------------------------------------------------
    def _hint(self, message: str) -> str | None:
        return message if self.debug else None

    async def _invoke(
        self, proc: Procedure, method: str, context: Mapping[str, Any], parameters: Any
    ) -> Outcome:
        # FunctionProcedure wraps its callable; look through to it
        target = getattr(proc, "fn", proc.execute)
        try:
            if inspect.iscoroutinefunction(target) or inspect.iscoroutinefunction(proc.execute):
                outcome = await proc.execute(context, parameters)
            else:
                outcome = await to_thread.run_sync(
                    functools.partial(proc.execute, context, parameters)
                )
                if inspect.isawaitable(outcome):
                    outcome = await outcome
        except Exception as exc:
            log.exception("procedure %r raised", method)
            return Outcome.fail(EINTRN, self._hint(f"{type(exc).__name__}: {exc}"))

        if not isinstance(outcome, Outcome):
            log.error("procedure %r returned %s instead of an Outcome", method, type(outcome).__name__)
            return Outcome.fail(EINTRN, self._hint("Procedure did not return an Outcome."))
        return outcome

    def _audit(self, proc: Procedure, method: str, outcome: Outcome) -> Outcome:
        if outcome.failed:
            declared = proc.errors()
            if outcome.error in declared or is_standard(outcome.error):
                return outcome
            log.debug("procedure %r returned undeclared error %r", method, outcome.error)
            return Outcome.fail(
                EERROR, {"expected": sorted(declared), "returned": outcome.error}
            )

        schema = proc.result()
        if not self._checker.conforms(outcome.value, schema):
            log.debug("procedure %r returned a result outside its schema", method)
            return Outcome.fail(ERESLT, {"expected": schema, "returned": outcome.value})
        return outcome
