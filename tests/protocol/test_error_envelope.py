from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from chesscore.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app()

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    body = r.json()
    assert "error" in body
    err = body["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"]
    assert err["request_id"] == r.headers["x-request-id"]


def test_unhandled_exception_renders_internal_error() -> None:
    app: FastAPI = create_app()

    @app.get("/crash")
    def crash():  # type: ignore[no-redef]
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    r = client.get("/crash")
    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "internal_error"
    assert err["type"] == "server_error"
    assert "kaboom" not in err["message"]


def test_validation_error_lists_fields() -> None:
    client = TestClient(create_app())
    r = client.post("/api/perft", json={"depth": 1})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert any(fe["field"].endswith("fen") for fe in err["field_errors"])


def test_unicode_digits_in_fen_are_a_bad_request() -> None:
    client = TestClient(create_app())
    r = client.post("/api/perft", json={"fen": "8/8/8/8/8/8/8/²²²² w - - 0 1", "depth": 1})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "invalid_fen"


def test_plain_value_error_maps_to_bad_request() -> None:
    app: FastAPI = create_app()

    @app.get("/bad-value")
    def bad_value():  # type: ignore[no-redef]
        raise ValueError("depth out of range")

    client = TestClient(app)
    r = client.get("/bad-value")
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "depth out of range"
    assert err["type"] == "client_error"
