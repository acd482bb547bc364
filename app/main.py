# app/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core import auth as core_auth
from app.core.envelope import install_error_handlers
from app.core.logging import setup_logging
from app.core.metrics import router_metrics
from app.infrastructure.clients.auth_client import AuthClient
from app.middleware.observability import ObservabilityMiddleware
from app.routers import comments as comments_router
from app.routers import health as health_router
from app.routers import videos as videos_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    setup_logging()

    # inicializa e injeta no módulo core_auth
    client = AuthClient(
        base_url=settings.auth_base_url,
        timeout_seconds=settings.auth_timeout_seconds,
        cache_ttl=settings.auth_cache_ttl_seconds,
    )
    core_auth.set_auth_client(client)
    app.state.auth_client = client

    try:
        yield
    finally:
        await client.aclose()
        core_auth.set_auth_client(None)


# --- App ---
app = FastAPI(
    title="Media Service",
    version="0.1.0",
    lifespan=lifespan,
    swagger_ui_parameters={"persistAuthorization": True},
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Observabilidade
app.add_middleware(ObservabilityMiddleware)

# Envelope de erro
install_error_handlers(app)

# Routers
app.include_router(videos_router.router)
app.include_router(comments_router.router)
app.include_router(health_router.router)
app.include_router(router_metrics)
