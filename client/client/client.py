"""Gateway client — thin JSON-RPC 2.0 consumer.

* ``call(method, params)``  → unary result
* ``batch(calls)``          → list of response envelopes, in call order
* ``catalog()``             → declared procedure contracts (debug servers)

Uses ``httpx.AsyncClient`` with connection pooling.
**Never** imports from ``gateway/``.

Run directly for a quick demo::

    python -m client.client
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from contract.jsonrpc import MEDIA_TYPE, JsonRpcRequest, JsonRpcResponse

log = logging.getLogger(__name__)


class RpcError(Exception):
    """Raised when the gateway answers with an error envelope."""

    def __init__(self, response: JsonRpcResponse) -> None:
        self.response = response
        self.code = response.error
        self.debug = response.debug
        msg = f"[{response.error}] request {response.id!r} failed"
        if response.has_debug:
            msg += f": {response.debug}"
        super().__init__(msg)


class RpcClient:
    """Thin async client that talks JSON-RPC 2.0 over HTTP.

    Parameters
    ----------
    base_url : str
        Gateway origin, e.g. ``http://127.0.0.1:8100``.
    path : str
        RPC endpoint path on the gateway.
    timeout : float
        Default request timeout in seconds.
    max_retries : int
        Max connection-level retries.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8100",
        path: str = "/rpc",
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.max_retries = max_retries
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    # -- Lifecycle -----------------------------------------------------

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # -- Internal helpers ----------------------------------------------

    def _get_retrier(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=0.5, max=10),
            retry=retry_if_exception_type((httpx.NetworkError, httpx.TimeoutException)),
            reraise=True,
        )

    async def _post(self, payload: Any) -> Any:
        async for attempt in self._get_retrier():
            with attempt:
                resp = await self._client.post(
                    self.path, json=payload, headers={"Content-Type": MEDIA_TYPE}
                )
                resp.raise_for_status()
        return resp.json()

    # -- Unary RPC -----------------------------------------------------

    async def call(self, method: str, params: Any = None) -> Any:
        """Send one request and return its result.

        Raises ``RpcError`` if the gateway returns an error envelope.
        """
        req = JsonRpcRequest(method=method, params=params)
        log.debug("rpc → %s(id=%s)", method, req.id)

        resp = JsonRpcResponse.from_dict(await self._post(req.to_dict()))
        if resp.failed:
            raise RpcError(resp)
        return resp.result

    # -- Batch RPC -----------------------------------------------------

    async def batch(self, calls: Iterable[tuple[str, Any]]) -> list[JsonRpcResponse]:
        """Send ``(method, params)`` pairs as one batch.

        Item errors are returned, not raised; a rejected batch as a whole
        raises ``RpcError``.
        """
        reqs = [JsonRpcRequest(method=method, params=params) for method, params in calls]
        log.debug("rpc batch → %d request(s)", len(reqs))

        data = await self._post([r.to_dict() for r in reqs])
        if isinstance(data, dict):
            raise RpcError(JsonRpcResponse.from_dict(data))
        return [JsonRpcResponse.from_dict(item) for item in data]

    # -- Introspection -------------------------------------------------

    async def catalog(self) -> dict[str, Any]:
        """Fetch the declared procedure contracts from a debug gateway."""
        async for attempt in self._get_retrier():
            with attempt:
                resp = await self._client.get(self.path)
                resp.raise_for_status()
        return resp.json()


# ── Demo entrypoint ──────────────────────────────────────────────────


async def _demo() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    async with RpcClient() as client:
        print("── add ──")
        result = await client.call("add", {"a": 17, "b": 25})
        print(f"  result: {result}")

        print("── divide by zero ──")
        try:
            await client.call("divide", {"a": 1, "b": 0})
        except RpcError as exc:
            print(f"  error: {exc.code}")

        print("── batch ──")
        for resp in await client.batch([("echo", {"msg": "hi"}), ("missing", None)]):
            print(f"  {resp.to_dict()}")

        print("── done ──")


if __name__ == "__main__":
    import anyio

    anyio.run(_demo)
