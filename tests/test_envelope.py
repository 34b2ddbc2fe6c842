"""Tests for envelope validation, batching and response rendering."""

import json

import pytest
from contract.procedure import Outcome
from gateway.renderer import DEBUG_ELAPSED_HEADER, ResponseRenderer

# ── Single requests ──────────────────────────────────────────────────


@pytest.mark.anyio
async def test_add_end_to_end(make_processor):
    body = await make_processor().handle(
        {"jsonrpc": "2.0", "method": "add", "id": 1, "params": {"a": 2, "b": 3}}
    )
    assert body == b'{"id":1,"result":5}'


@pytest.mark.anyio
@pytest.mark.parametrize("decoded", [5, "text", None, True, 1.5])
async def test_non_container_rejected(make_processor, decoded):
    body = await make_processor().handle(decoded)
    assert json.loads(body) == {"id": None, "error": "EREQST"}


@pytest.mark.anyio
@pytest.mark.parametrize(
    "request_obj",
    [
        {"jsonrpc": "1.0", "method": "add"},
        {"method": "add"},
        {"jsonrpc": "2.0"},
        {"jsonrpc": "2.0", "method": 5},
        {"jsonrpc": "2.0", "method": "add", "id": {"x": 1}},
        {"jsonrpc": "2.0", "method": "add", "params": "a,b"},
    ],
)
async def test_invalid_envelope(make_processor, request_obj):
    body = await make_processor().handle(request_obj)
    assert json.loads(body) == {"id": None, "error": "EREQST"}


@pytest.mark.anyio
async def test_invalid_envelope_debug_message(make_processor):
    body = await make_processor(debug=True).handle({"jsonrpc": "1.0", "method": "add"})
    assert json.loads(body) == {
        "id": None,
        "error": "EREQST",
        "debug": "Content is not a valid JSON RPC 2.0 request",
    }


@pytest.mark.anyio
@pytest.mark.parametrize("req_id, expected", [("abc", "abc"), (7, 7), (0, 0), ("", None), (None, None)])
async def test_id_echo(make_processor, req_id, expected):
    body = await make_processor().handle(
        {"jsonrpc": "2.0", "method": "echo", "id": req_id, "params": {"k": 1}}
    )
    assert json.loads(body) == {"id": expected, "result": {"k": 1}}


@pytest.mark.anyio
async def test_missing_id_is_null(make_processor):
    body = await make_processor().handle({"jsonrpc": "2.0", "method": "echo", "params": [1]})
    assert json.loads(body) == {"id": None, "result": [1]}


@pytest.mark.anyio
async def test_empty_array_params_become_null(make_processor):
    body = await make_processor().handle(
        {"jsonrpc": "2.0", "method": "nothing", "id": 1, "params": []}
    )
    assert json.loads(body) == {"id": 1, "result": None}


@pytest.mark.anyio
async def test_empty_object_params_are_kept(make_processor):
    body = await make_processor().handle(
        {"jsonrpc": "2.0", "method": "opts", "id": 1, "params": {}}
    )
    assert body == b'{"id":1,"result":{}}'


@pytest.mark.anyio
async def test_unknown_method(make_processor):
    body = await make_processor().handle({"jsonrpc": "2.0", "method": "unknown", "id": 9})
    assert json.loads(body) == {"id": 9, "error": "EREQST"}


@pytest.mark.anyio
async def test_debug_detail_only_in_debug(make_processor):
    req = {"jsonrpc": "2.0", "method": "rogue", "id": 1, "params": {"code": "X"}}
    assert json.loads(await make_processor().handle(req)) == {"id": 1, "error": "X"}
    assert json.loads(await make_processor(debug=True).handle(req)) == {
        "id": 1,
        "error": "EERROR",
        "debug": {"expected": ["EKNOWN"], "returned": "X"},
    }


@pytest.mark.anyio
async def test_failure_without_detail_omits_debug(make_processor):
    req = {"jsonrpc": "2.0", "method": "rogue", "id": 1, "params": {"code": "EKNOWN"}}
    assert json.loads(await make_processor(debug=True).handle(req)) == {"id": 1, "error": "EKNOWN"}


# ── Batches ──────────────────────────────────────────────────────────


@pytest.mark.anyio
async def test_batch_example(make_processor):
    body = await make_processor().handle(
        [
            {"jsonrpc": "2.0", "method": "add", "id": 1, "params": {"a": 1, "b": 1}},
            {"jsonrpc": "2.0", "method": "unknown", "id": 2},
        ]
    )
    assert body == b'[{"id":1,"result":2},{"id":2,"error":"EREQST"}]'


@pytest.mark.anyio
async def test_batch_preserves_order_and_isolates_failures(make_processor):
    batch = [
        {"jsonrpc": "2.0", "method": "add", "id": i, "params": {"a": i, "b": 1}} for i in range(5)
    ]
    batch.insert(2, {"jsonrpc": "2.0", "method": "crash", "id": "c"})
    batch.insert(4, {"jsonrpc": "2.0", "method": "add", "id": "p", "params": {"a": 1}})

    out = json.loads(await make_processor().handle(batch))

    assert len(out) == len(batch)
    assert [r["id"] for r in out] == [req["id"] for req in batch]
    assert out[2] == {"id": "c", "error": "EINTRN"}
    assert out[4] == {"id": "p", "error": "EPARAM"}
    assert [r["result"] for r in out if "result" in r] == [1, 2, 3, 4, 5]


@pytest.mark.anyio
@pytest.mark.parametrize("debug", [False, True])
async def test_unserializable_result_is_isolated(make_processor, debug):
    out = json.loads(
        await make_processor(debug=debug).handle(
            [
                {"jsonrpc": "2.0", "method": "opts", "id": 1, "params": {"x": 1}},
                {"jsonrpc": "2.0", "method": "when", "id": 2},
                {"jsonrpc": "2.0", "method": "huge", "id": 3},
                {"jsonrpc": "2.0", "method": "add", "id": 4, "params": {"a": 1, "b": 2}},
            ]
        )
    )
    assert out[0] == {"id": 1, "result": {"x": 1}}
    assert out[3] == {"id": 4, "result": 3}
    for item, req_id in ((out[1], 2), (out[2], 3)):
        assert item["id"] == req_id
        assert item["error"] == "EINTRN"
        assert ("debug" in item) is debug
    if debug:
        assert out[1]["debug"].startswith("Response is not serializable as JSON")


@pytest.mark.anyio
async def test_empty_batch(make_processor):
    assert await make_processor().handle([]) == b"[]"


@pytest.mark.anyio
@pytest.mark.parametrize("debug", [False, True])
async def test_malformed_batch_rejected_whole(make_processor, debug):
    body = await make_processor(debug=debug).handle(
        [
            {"jsonrpc": "2.0", "method": "add", "id": 1, "params": {"a": 1, "b": 1}},
            {"jsonrpc": "2.0", "id": 2},
        ]
    )
    expected = {"id": None, "error": "EREQST"}
    if debug:
        expected["debug"] = "Content is not a valid JSON RPC 2.0 batch request"
    assert json.loads(body) == expected


# ── Renderer ─────────────────────────────────────────────────────────


class TestResponseRenderer:
    def test_error_detail_dropped_outside_debug(self):
        body = ResponseRenderer(debug=False).render(3, "EX", {"secret": 1})
        assert body == b'{"id":3,"error":"EX"}'

    def test_error_detail_kept_in_debug(self):
        body = ResponseRenderer(debug=True).render(3, "EX", {"secret": 1})
        assert json.loads(body) == {"id": 3, "error": "EX", "debug": {"secret": 1}}

    def test_render_outcome_sets(self):
        body = ResponseRenderer(debug=True).render_outcome(1, Outcome.fail("EX", {"a", "b"}))
        assert json.loads(body) == {"id": 1, "error": "EX", "debug": ["a", "b"]}

    def test_headers(self):
        assert ResponseRenderer(debug=False).headers(0.0) == {"Content-Type": "application/json"}
        headers = ResponseRenderer(debug=True).headers(0.0)
        assert headers["Content-Type"] == "application/json"
        assert float(headers[DEBUG_ELAPSED_HEADER]) >= 0

    def test_non_finite_floats_refused(self):
        with pytest.raises(ValueError):
            ResponseRenderer().render(1, None, float("nan"))
