# app/domain/repositories/video_repository_interface.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.domain.models.video import Video
from app.domain.query import SortSpec, VideoFilter


class IVideoRepository(ABC):
    """Contrato para persistência de vídeos"""

    @abstractmethod
    def list(self, spec: VideoFilter, sort: SortSpec, offset: int, limit: int) -> List[Video]:
        """Lista filtrada, ordenada e paginada; vazio não é erro"""
        pass

    @abstractmethod
    def put(self, video: Video) -> Video:
        """Insere um novo vídeo"""
        pass

    @abstractmethod
    def get(self, video_id: str) -> Optional[Video]:
        """Busca um vídeo pelo ID"""
        pass

    @abstractmethod
    def update_fields(self, video_id: str, fields: Dict[str, Any]) -> Optional[Video]:
        """Atualiza campos mutáveis; None se o vídeo não existe"""
        pass

    @abstractmethod
    def delete(self, video_id: str) -> Optional[Video]:
        """Remove e devolve o estado anterior; None se não existia"""
        pass

    @abstractmethod
    def toggle_published(self, video_id: str) -> Optional[Video]:
        """Inverte isPublished atomicamente; None se o vídeo não existe"""
        pass
