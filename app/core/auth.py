# app/core/auth.py
from __future__ import annotations
from typing import Optional
from fastapi import Security, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
import httpx
import hashlib
import logging

from app.core.logging import set_request_context
from app.domain.models.user_model import UserContext
from app.infrastructure.clients.auth_client import AuthClient


logger = logging.getLogger("auth")

auth_client: Optional[AuthClient] = None  # inicializado no lifespan (main.py)
bearer_scheme = HTTPBearer(auto_error=False)

def _safe_token_id(token: str) -> str:
    # não loga o token; loga um identificador abreviado
    return hashlib.sha1(token.encode()).hexdigest()[:8]

def set_auth_client(client: Optional[AuthClient]) -> None:
    """
    Permite override em testes ou inicialização manual.
    Ex.: set_auth_client(AuthClient(base_url="http://auth-service:8000", ...))
    """
    global auth_client
    auth_client = client


def _ensure_client() -> AuthClient:
    global auth_client
    if auth_client is not None:
        return auth_client
    # cria on-demand a partir de settings
    from app import config
    base_url = getattr(config.settings, "auth_base_url", None)
    if not base_url:
        logger.error("AUTH_BASE_URL ausente; não dá para inicializar AuthClient")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="Serviço de autenticação indisponível")

    from app.infrastructure.clients import auth_client as client_mod
    auth_client = client_mod.AuthClient(
        base_url=base_url,
        timeout_seconds=config.settings.auth_timeout_seconds,
        cache_ttl=config.settings.auth_cache_ttl_seconds,
    )
    logger.info("AuthClient criado on-demand (base_url=%s)", base_url)
    return auth_client

async def _fetch_me(token: str) -> dict:
    tid = _safe_token_id(token)
    client = _ensure_client()

    try:
        logger.debug("Chamando /me (token_id=%s)", tid)
        data = await client.me(token)
        logger.info("Auth OK (token_id=%s)", tid)
        return data
    except httpx.HTTPStatusError as e:
        sc = e.response.status_code
        logger.warning("HTTPStatusError em /me (status=%s url=%s token_id=%s)", sc, e.request.url, tid)
        if sc in (401, 403):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido ou expirado")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Falha ao validar token no Auth Service")
    except (httpx.TimeoutException, httpx.RequestError) as e:
        logger.error("Erro de rede em /me (token_id=%s): %s", tid, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Auth Service inacessível")

async def require_user(
    credentials: HTTPAuthorizationCredentials = Security(bearer_scheme)
) -> UserContext:
    """
    Dependency principal. Valida o Bearer e devolve o usuário autenticado;
    o id dele é o dono de vídeos e comentários criados.
    """
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token ausente")
    token = credentials.credentials.strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token vazio")

    payload = await _fetch_me(token)
    try:
        user = UserContext.model_validate(payload)
    except PydanticValidationError:
        logger.warning("Payload de /me sem id/username (token_id=%s)", _safe_token_id(token))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido ou expirado")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Usuário inativo")

    set_request_context(user_id=user.id)
    return user
