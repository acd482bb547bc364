from typing import Any, List

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.core.envelope import ApiResponse, enveloped, install_error_handlers
from app.core.errors import NotFoundError, PartialUploadError, PersistenceError, ValidationError


@pytest.fixture
def client():
    app = FastAPI()
    install_error_handlers(app)

    @app.get("/ok", response_model=ApiResponse[List[int]])
    @enveloped("tudo certo")
    def ok(n: int = 3):
        return list(range(n))

    @app.post("/created", response_model=ApiResponse[dict], status_code=201)
    @enveloped("criado", status_code=201)
    async def created():
        return {"id": "x"}

    @app.get("/empty", response_model=ApiResponse[List[Any]])
    @enveloped("nada")
    def empty():
        return []

    errors = {
        "validation": ValidationError("campo obrigatório"),
        "notfound": NotFoundError("não achei"),
        "persistence": PersistenceError(),
        "partial": PartialUploadError("metade subiu", cleanup_succeeded=False, errors=["S3 down"]),
        "http": HTTPException(status_code=401, detail="Token ausente"),
        "boom": RuntimeError("inesperado"),
    }

    @app.get("/fail/{kind}")
    @enveloped("nunca")
    def fail(kind: str):
        raise errors[kind]

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def test_success_envelope(client):
    r = client.get("/ok", params={"n": 2})
    assert r.status_code == 200
    assert r.json() == {"status": 200, "data": [0, 1], "message": "tudo certo", "success": True}


def test_async_handler_and_custom_status(client):
    r = client.post("/created")
    assert r.status_code == 201
    assert r.json()["status"] == 201
    assert r.json()["data"] == {"id": "x"}


def test_empty_data_is_success(client):
    r = client.get("/empty")
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["success"] is True


def test_wrapped_handler_keeps_its_signature_for_validation(client):
    r = client.get("/ok", params={"n": "abc"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["errors"][0]["loc"] == ["query", "n"]


@pytest.mark.parametrize("kind,status,message", [
    ("validation", 400, "campo obrigatório"),
    ("notfound", 404, "não achei"),
    ("persistence", 500, "Falha no banco de documentos"),
    ("partial", 500, "metade subiu"),
    ("http", 401, "Token ausente"),
    ("boom", 500, "Erro interno"),
])
def test_error_envelope(client, kind, status, message):
    r = client.get(f"/fail/{kind}")
    assert r.status_code == status
    body = r.json()
    assert body["status"] == status
    assert body["message"] == message
    assert body["success"] is False
    assert isinstance(body["errors"], list)
    assert "data" not in body


def test_partial_upload_error_reports_cleanup(client):
    body = client.get("/fail/partial").json()
    assert body["errors"] == ["S3 down", {"cleanup": "failed"}]
