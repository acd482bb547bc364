# app/core/envelope.py
"""
Envelope uniforme das respostas.

Sucesso: {status, data, message, success}
Erro:    {status, message, errors, success=false}

Os handlers das rotas são compostos com ``enveloped`` e a app instala os
exception handlers com ``install_error_handlers``.
"""
import functools
import inspect
import logging
from typing import Any, Callable, Generic, List, Optional, TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError

T = TypeVar("T")

logger = logging.getLogger("http")


class ApiResponse(BaseModel, Generic[T]):
    status: int
    data: Optional[T] = None
    message: str = "Success"
    success: bool = True


class ApiErrorBody(BaseModel):
    status: int
    message: str
    errors: List[Any] = Field(default_factory=list)
    success: bool = False


def _wrap(result: Any, status_code: int, message: str) -> ApiResponse:
    return ApiResponse(status=status_code, data=result, message=message, success=status_code < 400)


def enveloped(message: str, status_code: int = 200) -> Callable:
    """Compõe um handler de rota com o envelope de sucesso."""
    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                return _wrap(await func(*args, **kwargs), status_code, message)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            return _wrap(func(*args, **kwargs), status_code, message)
        return wrapper
    return decorator


def error_response(status_code: int, message: str, errors: Optional[List[Any]] = None,
                   headers: Optional[dict] = None) -> JSONResponse:
    body = ApiErrorBody(status=status_code, message=message, errors=errors or [])
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s falhou: %s", request.method, request.url.path, exc.message,
                     exc_info=exc.__cause__ is not None)
    else:
        logger.info("%s %s rejeitado (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_response(exc.status_code, exc.message, exc.errors)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return error_response(400, "Parâmetros inválidos", errors)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Erro não tratado em %s %s", request.method, request.url.path)
    return error_response(500, "Erro interno")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
