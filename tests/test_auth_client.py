import json
import pytest
import httpx

from app.infrastructure.clients.auth_client import AuthClient


# ========= Stub/fixture =========

class StubHTTPClient:
    """
    Cliente HTTP assíncrono fake para injetar via monkeypatch em AuthClient._get_client.
    Controla respostas por (method, path) e registra chamadas.
    """
    def __init__(self):
        self.responses = {}  # key: (method, path) -> httpx.Response
        self.calls = []      # lista de dicts com 'method', 'path', 'headers'
        self.closed = False

    def set_json(self, method: str, path: str, status: int, payload: dict):
        req = httpx.Request(method.upper(), f"http://fake{path}", headers={})
        resp = httpx.Response(
            status_code=status,
            headers={"content-type": "application/json"},
            content=json.dumps(payload).encode("utf-8"),
            request=req,
        )
        self.responses[(method.upper(), path)] = resp

    async def get(self, path: str, headers=None):
        self.calls.append({"method": "GET", "path": path, "headers": headers or {}})
        resp = self.responses.get(("GET", path))
        if resp is None:
            req = httpx.Request("GET", f"http://fake{path}", headers=headers or {})
            return httpx.Response(500, request=req, content=b"")
        return resp

    async def aclose(self):
        self.closed = True


@pytest.fixture
def stub_client():
    return StubHTTPClient()


@pytest.fixture
def client_with_stub(monkeypatch, stub_client):
    c = AuthClient("http://auth:8000", cache_ttl=30)

    async def fake_get_client():
        return stub_client
    monkeypatch.setattr(c, "_get_client", fake_get_client, raising=False)
    return c


# ========= _get_client (hooks + singleton) =========

@pytest.mark.asyncio
async def test_get_client_builds_asyncclient_with_hooks_and_singleton(monkeypatch):
    captured_init = {}

    class CapturingAsyncClient:
        def __init__(self, *, base_url, timeout, event_hooks):
            captured_init["base_url"] = str(base_url)
            captured_init["timeout"] = timeout
            captured_init["event_hooks"] = event_hooks

    import app.infrastructure.clients.auth_client as mod
    monkeypatch.setattr(mod.httpx, "AsyncClient", CapturingAsyncClient, raising=True)

    client = AuthClient("http://auth:8000/", timeout_seconds=7, cache_ttl=30)

    ac1 = await client._get_client()
    ac2 = await client._get_client()
    assert ac1 is ac2

    assert captured_init["base_url"] == "http://auth:8000"
    assert captured_init["timeout"] == 7
    assert callable(captured_init["event_hooks"]["request"][0])
    assert callable(captured_init["event_hooks"]["response"][0])


# ========= me =========

@pytest.mark.asyncio
async def test_me_success_and_authorization_header_and_cache(monkeypatch, client_with_stub, stub_client):
    # controla o relógio (agora=1000, depois=1005 => ainda dentro do TTL)
    times = [1000.0, 1005.0]
    monkeypatch.setattr(
        "app.infrastructure.clients.auth_client.time.time",
        lambda: times.pop(0) if times else 1005.0,
        raising=True,
    )

    stub_client.set_json("GET", "/api/v1/auth/me", 200, {"id": 1, "username": "ana"})

    out1 = await client_with_stub.me("tok")
    out2 = await client_with_stub.me("tok")
    assert out1 == out2 == {"id": 1, "username": "ana"}

    gets = [call for call in stub_client.calls if call["method"] == "GET"]
    assert len(gets) == 1
    assert gets[0]["headers"].get("Authorization") == "Bearer tok"


@pytest.mark.asyncio
async def test_me_cache_expires_and_refetches(monkeypatch, client_with_stub, stub_client):
    tvals = [1000.0, 1035.0]
    monkeypatch.setattr("app.infrastructure.clients.auth_client.time.time", lambda: tvals.pop(0), raising=True)
    stub_client.set_json("GET", "/api/v1/auth/me", 200, {"id": 1})

    await client_with_stub.me("tok")  # cacheia até 1030
    await client_with_stub.me("tok")  # expirada => refaz GET

    assert len(stub_client.calls) == 2


@pytest.mark.asyncio
async def test_me_cache_is_per_token(monkeypatch, client_with_stub, stub_client):
    monkeypatch.setattr("app.infrastructure.clients.auth_client.time.time", lambda: 1000.0, raising=True)
    stub_client.set_json("GET", "/api/v1/auth/me", 200, {"id": 1})

    await client_with_stub.me("tok-A")
    await client_with_stub.me("tok-B")
    assert len(stub_client.calls) == 2


@pytest.mark.asyncio
async def test_me_raises_on_non_2xx(client_with_stub, stub_client):
    req = httpx.Request("GET", "http://fake/api/v1/auth/me")
    stub_client.responses[("GET", "/api/v1/auth/me")] = httpx.Response(401, request=req, text="unauthorized")

    with pytest.raises(httpx.HTTPStatusError):
        await client_with_stub.me("bad")


# ========= aclose =========

@pytest.mark.asyncio
async def test_aclose_closes_and_resets():
    c = AuthClient("http://auth:8000")
    stub = StubHTTPClient()
    c._client = stub

    await c.aclose()
    assert stub.closed is True
    assert c._client is None
