from fastapi import FastAPI
from fastapi.testclient import TestClient

from ecommerce.errors import GENERIC_ERROR, NotFoundError, register_error_handlers


def _app():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database exploded")

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Widget not found")

    return app


def test_unexpected_error_becomes_generic_500():
    with TestClient(_app()) as client:
        resp = client.get("/boom")
    assert resp.status_code == 500
    assert resp.json() == {
        "statusCode": 500,
        "message": "Internal Server Error",
        "errors": [GENERIC_ERROR],
    }
    assert "exploded" not in resp.text


def test_app_error_keeps_its_status():
    with TestClient(_app()) as client:
        resp = client.get("/missing")
    assert resp.status_code == 404
    assert resp.json() == {"statusCode": 404, "message": "Widget not found", "errors": []}


def test_unknown_route_uses_error_envelope():
    with TestClient(_app()) as client:
        resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.json()["statusCode"] == 404
