"""Envelope processing.

Validates a decoded JSON value against the single and batch request
shapes, extracts ``id``/``method``/``params`` and drives the dispatcher
once per request.
"""

from __future__ import annotations

import logging
from typing import Any

from contract.errors import EINTRN, EREQST
from contract.jsonrpc import BATCH_SCHEMA, REQUEST_SCHEMA
from contract.schema import SchemaChecker
from gateway.dispatcher import Dispatcher
from gateway.renderer import ResponseRenderer

log = logging.getLogger(__name__)


def _empty(value: Any) -> bool:
    # an empty object is a value; only null, "" and [] count as absent
    return value is None or value == "" or value == []


class EnvelopeProcessor:
    def __init__(
        self,
        dispatcher: Dispatcher,
        renderer: ResponseRenderer,
        checker: SchemaChecker | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._renderer = renderer
        self._checker = checker or SchemaChecker()

    async def handle(self, decoded: Any) -> bytes:
        """Process one decoded request body and return the serialized response."""
        if isinstance(decoded, dict):
            if not self._checker.conforms(decoded, REQUEST_SCHEMA):
                log.warning("rejected request envelope")
                return self._renderer.render(
                    None, EREQST, "Content is not a valid JSON RPC 2.0 request"
                )
            return await self._handle_one(decoded)

        if isinstance(decoded, list):
            if not self._checker.conforms(decoded, BATCH_SCHEMA):
                log.warning("rejected batch envelope (%d item(s))", len(decoded))
                return self._renderer.render(
                    None, EREQST, "Content is not a valid JSON RPC 2.0 batch request"
                )
            log.debug("batch of %d request(s)", len(decoded))
            parts = [await self._handle_one(item) for item in decoded]
            return b"[" + b",".join(parts) + b"]"

        return self._renderer.render(None, EREQST, "Content is not a valid JSON RPC 2.0 request")

    async def _handle_one(self, request: dict[str, Any]) -> bytes:
        req_id = None if _empty(request.get("id")) else request["id"]
        params = None if _empty(request.get("params")) else request["params"]
        method = request["method"]

        log.info("rpc <- %s(id=%s)", method, req_id)
        outcome = await self._dispatcher.execute_procedure({}, method, params)
        try:
            return self._renderer.render_outcome(req_id, outcome)
        except (TypeError, ValueError) as exc:
            log.exception("could not serialize the response of %r", method)
            return self._renderer.render(
                req_id, EINTRN, f"Response is not serializable as JSON: {exc}"
            )
