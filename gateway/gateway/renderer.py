"""Response rendering.

Turns a dispatch outcome into the serialized ``{id, result|error[, debug]}``
envelope.  Debug detail is dropped here unless the server runs in debug
mode.
"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from typing import Any

from contract.jsonrpc import MEDIA_TYPE, JsonRpcResponse
from contract.procedure import Outcome

DEBUG_ELAPSED_HEADER = "X-Rpc-Debug-Elapsed"


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(payload: Any) -> bytes:
    return json.dumps(
        payload, separators=(",", ":"), allow_nan=False, default=_jsonable
    ).encode("utf-8")


class ResponseRenderer:
    def __init__(self, debug: bool = False) -> None:
        self.debug = debug

    def envelope(self, req_id: Any, error: str | None, result: Any) -> JsonRpcResponse:
        if error:
            return JsonRpcResponse.fail(req_id, error, result if self.debug else None)
        return JsonRpcResponse.success(req_id, result)

    def render(self, req_id: Any, error: str | None, result: Any) -> bytes:
        return dumps(self.envelope(req_id, error, result).to_dict())

    def render_outcome(self, req_id: Any, outcome: Outcome) -> bytes:
        return self.render(req_id, outcome.error, outcome.value)

    def headers(self, started: float | None = None) -> dict[str, str]:
        """Response headers; *started* is a ``time.perf_counter()`` reading."""
        headers = {"Content-Type": MEDIA_TYPE}
        if self.debug and started is not None:
            headers[DEBUG_ELAPSED_HEADER] = f"{time.perf_counter() - started:.6f}"
        return headers
