from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class Video(BaseModel):
    # atributos internos (ex.: sombras de busca) não saem do repositório
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: str
    videoFile: str
    thumbnail: str
    duration: float = Field(0, allow_inf_nan=False)
    owner: str
    isPublished: bool = False
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
