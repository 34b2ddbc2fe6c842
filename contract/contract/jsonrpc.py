"""JSON-RPC 2.0 wire shapes.

Pure data, no I/O.  The gateway validates inbound envelopes against the
schemas below and builds outbound ones with ``JsonRpcResponse``; the
client uses the same models to build requests and read responses.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"
MEDIA_TYPE = "application/json"

# ── Envelope schemas ─────────────────────────────────────────────────
REQUEST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["jsonrpc", "method"],
    "properties": {
        "jsonrpc": {"enum": [JSONRPC_VERSION]},
        "method": {"type": "string"},
        "id": {"type": ["string", "number", "null"]},
        "params": {"type": ["array", "object"]},
    },
}

BATCH_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": REQUEST_SCHEMA,
}


# ── Models ───────────────────────────────────────────────────────────
@dataclass(slots=True)
class JsonRpcRequest:
    """Outbound JSON-RPC 2.0 request, as built by the client.

    ``id`` is auto-generated if not supplied.
    """

    method: str
    params: Any = None
    id: str | int | None = field(default_factory=lambda: uuid.uuid4().hex)
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method, "id": self.id}
        if self.params is not None:
            d["params"] = self.params
        return d


@dataclass(slots=True)
class JsonRpcResponse:
    """One response envelope: ``{id, result}`` or ``{id, error[, debug]}``."""

    id: Any = None
    result: Any = None
    error: str | None = None
    debug: Any = None
    has_debug: bool = False

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id}
        if self.error is not None:
            d["error"] = self.error
            if self.has_debug:
                d["debug"] = self.debug
        else:
            d["result"] = self.result
        return d

    # -- Factories -----------------------------------------------------
    @classmethod
    def success(cls, req_id: Any, result: Any) -> "JsonRpcResponse":
        return cls(id=req_id, result=result)

    @classmethod
    def fail(cls, req_id: Any, code: str, debug: Any = None) -> "JsonRpcResponse":
        return cls(id=req_id, error=code, debug=debug, has_debug=debug is not None)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "JsonRpcResponse":
        """Parse a decoded response object, raises ``ValueError`` on bad input."""
        if not isinstance(raw, dict) or "id" not in raw:
            raise ValueError("response must be a JSON object with an 'id'")
        if "error" in raw:
            return cls(
                id=raw["id"],
                error=raw["error"],
                debug=raw.get("debug"),
                has_debug="debug" in raw,
            )
        if "result" not in raw:
            raise ValueError("response carries neither 'result' nor 'error'")
        return cls.success(raw["id"], raw["result"])

    @property
    def failed(self) -> bool:
        return self.error is not None
