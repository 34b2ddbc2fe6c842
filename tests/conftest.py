"""Shared fixtures: a small procedure set with well-behaved and misbehaving members."""

import datetime
import threading

import pytest
from contract.procedure import Outcome, ProcedureRegistry

from gateway.config import ServerConfig
from gateway.dispatcher import Dispatcher
from gateway.envelope import EnvelopeProcessor
from gateway.handlers import registry as example_registry
from gateway.renderer import ResponseRenderer


@pytest.fixture
def anyio_backend():
    return "asyncio"


def build_procedures():
    procs = ProcedureRegistry()

    @procs.procedure("rogue", parameters=True, result=True, errors={"EKNOWN"})
    async def rogue(context, params):
        """Fails with whatever code it is asked to."""
        return Outcome.fail(params["code"], params.get("detail"))

    @procs.procedure("liar", parameters=True, result={"type": "integer"})
    def liar(context, params):
        return Outcome.ok("not an integer")

    @procs.procedure("crash")
    def crash(context, params):
        raise RuntimeError("boom")

    @procs.procedure("sloppy")
    async def sloppy(context, params):
        return 42

    @procs.procedure("nothing", parameters={"type": "null"}, result={"type": "null"})
    async def nothing(context, params):
        return Outcome.ok(None)

    @procs.procedure(
        "opts",
        parameters={"type": "object", "properties": {"x": {"type": "integer"}}},
    )
    async def opts(context, params):
        return Outcome.ok(params)

    @procs.procedure("when")
    async def when(context, params):
        return Outcome.ok(datetime.date(2024, 1, 2))

    @procs.procedure("huge")
    async def huge(context, params):
        return Outcome.ok(float("inf"))

    @procs.procedure("where")
    async def where(context, params):
        return Outcome.ok(threading.get_ident())

    mapping = example_registry.as_mapping()
    mapping.update(procs.as_mapping())
    return mapping


@pytest.fixture
def procedures():
    return build_procedures()


@pytest.fixture
def make_processor(procedures):
    def _make(debug=False):
        config = ServerConfig(procedures=procedures, debug=debug)
        return EnvelopeProcessor(Dispatcher(config), ResponseRenderer(debug=debug))

    return _make


@pytest.fixture
def make_dispatcher(procedures):
    def _make(debug=False):
        return Dispatcher(ServerConfig(procedures=procedures, debug=debug))

    return _make
