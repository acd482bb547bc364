# app/core/errors.py
from typing import Any, List, Optional


class AppError(Exception):
    """Erro de domínio com status HTTP associado; vira envelope de erro na borda."""
    status_code: int = 500
    default_message: str = "Erro interno"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Requisição inválida"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Recurso não encontrado"


class StorageError(AppError):
    status_code = 500
    default_message = "Falha ao salvar no storage"


class PartialUploadError(StorageError):
    """Um asset subiu e o seguinte falhou; a limpeza do primeiro foi tentada."""

    def __init__(self, message: Optional[str] = None, *, cleanup_succeeded: bool,
                 errors: Optional[List[Any]] = None):
        self.cleanup_succeeded = cleanup_succeeded
        details = list(errors or [])
        details.append({"cleanup": "ok" if cleanup_succeeded else "failed"})
        super().__init__(message, details)


class PersistenceError(AppError):
    status_code = 500
    default_message = "Falha no banco de documentos"
