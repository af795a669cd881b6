"""Tests for request-id propagation into the response envelope."""

from types import SimpleNamespace

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from src.ct_common.errors import OrderNotFoundError
from src.ct_common.response import ApiResponse, error_response_for, respond
from src.ct_gateway.middleware.request_log import (
    REQUEST_ID_HEADER,
    RequestLogMiddleware,
    resolve_request_id,
)


class TestResolveRequestId:
    def test_reuses_well_formed_incoming_id(self) -> None:
        assert resolve_request_id("proxy-abc12345") == "proxy-abc12345"

    @pytest.mark.parametrize("incoming", [None, "", "short", "has space inside", "x" * 65])
    def test_generates_fresh_id_otherwise(self, incoming: str | None) -> None:
        generated = resolve_request_id(incoming)
        assert generated.startswith("req_")
        assert generated != incoming


class TestEnvelopeHelpers:
    def test_respond_uses_request_state_id(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace(request_id="req_fromstate"))
        resp = respond(request, {"x": 1}, "done")  # type: ignore[arg-type]
        assert resp.request_id == "req_fromstate"
        assert resp.code == 0
        assert resp.message == "done"
        assert resp.data == {"x": 1}

    def test_respond_without_middleware_still_has_id(self) -> None:
        resp = respond(SimpleNamespace(state=SimpleNamespace()))  # type: ignore[arg-type]
        assert resp.request_id.startswith("req_")

    def test_error_response_for_app_error(self) -> None:
        resp = error_response_for(OrderNotFoundError("o-9"), "req_abcdef12")
        assert resp.code == 4004
        assert resp.kind == "NOT_FOUND"
        assert resp.data is None
        assert resp.request_id == "req_abcdef12"


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLogMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> ApiResponse:
        return respond(request)

    return app


class TestRequestLogMiddleware:
    async def test_id_in_header_matches_envelope(self, app: FastAPI) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://t") as client:
            resp = await client.get("/echo")
        assert resp.headers[REQUEST_ID_HEADER] == resp.json()["request_id"]

    async def test_incoming_id_propagated(self, app: FastAPI) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://t") as client:
            resp = await client.get("/echo", headers={REQUEST_ID_HEADER: "upstream-0001"})
        assert resp.headers[REQUEST_ID_HEADER] == "upstream-0001"
        assert resp.json()["request_id"] == "upstream-0001"
