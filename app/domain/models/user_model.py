from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional


class UserContext(BaseModel):
    """Usuário autenticado, como devolvido pelo /me do Auth Service."""
    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar: Optional[str] = None
    is_active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        # o Auth Service pode devolver id numérico
        return str(v) if v is not None else v
