"""Gateway compartment — Starlette ASGI server.

Single ``/rpc`` POST endpoint that accepts single and batch JSON-RPC 2.0
requests.  In debug mode ``GET /rpc`` additionally lists the registered
procedures and their declared contracts.

Run directly::

    python -m gateway.server
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from contract.errors import EREQST
from contract.jsonrpc import MEDIA_TYPE
from gateway.config import ServerConfig
from gateway.dispatcher import Dispatcher
from gateway.envelope import EnvelopeProcessor
from gateway.renderer import ResponseRenderer, dumps

log = logging.getLogger(__name__)

RPC_PATH = "/rpc"


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not a JSON value")


# ── Endpoints ────────────────────────────────────────────────────────


async def rpc_endpoint(request: Request) -> Response:
    """Handle a JSON-RPC 2.0 POST to ``/rpc``."""
    started = time.perf_counter()
    renderer: ResponseRenderer = request.app.state.renderer
    processor: EnvelopeProcessor = request.app.state.processor

    if not request.headers.get("content-type", "").startswith(MEDIA_TYPE):
        body = renderer.render(None, EREQST, f"Content-Type is not {MEDIA_TYPE}.")
        return Response(body, headers=renderer.headers(started))

    try:
        raw = await request.body()
        decoded = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        body = renderer.render(None, EREQST, "Content is not decodeable as JSON.")
        return Response(body, headers=renderer.headers(started))

    body = await processor.handle(decoded)
    return Response(body, headers=renderer.headers(started))


async def catalog_endpoint(request: Request) -> Response:
    """List every procedure's declared contract (debug mode only)."""
    config: ServerConfig = request.app.state.config
    catalog = {
        name: {
            "description": proc.description(),
            "parameters": proc.parameters(),
            "result": proc.result(),
            "errors": sorted(proc.errors()),
        }
        for name, proc in config.procedures.items()
    }
    return Response(dumps(catalog), media_type=MEDIA_TYPE)


# ── App factory ──────────────────────────────────────────────────────


def create_app(config: ServerConfig | None = None, path: str = RPC_PATH) -> Starlette:
    """Build the ASGI app.

    Without *config* the example procedures are served and the debug flag
    is read from the environment.
    """
    if config is None:
        from gateway.handlers import registry

        config = ServerConfig.from_env(registry.as_mapping())

    routes = [Route(path, rpc_endpoint, methods=["POST"])]
    if config.debug:
        routes.append(Route(path, catalog_endpoint, methods=["GET"]))

    app = Starlette(debug=config.debug, routes=routes)
    app.state.config = config
    app.state.renderer = ResponseRenderer(debug=config.debug)
    app.state.processor = EnvelopeProcessor(Dispatcher(config), app.state.renderer)
    log.info("serving %d procedure(s) on %s (debug=%s)", len(config.procedures), path, config.debug)
    return app


app = create_app()


# ── Runnable entrypoint ──────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv(os.path.join(Path.cwd(), ".env"))
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "gateway.server:app",
        host=os.getenv("RPC_HOST", "127.0.0.1"),
        port=int(os.getenv("RPC_PORT", "8100")),
        log_level="info",
    )
