# app/domain/repositories/comment_repository_interface.py
from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.models.comment import Comment, CommentWithOwner


class ICommentRepository(ABC):
    """Contrato para persistência de comentários"""

    @abstractmethod
    def put(self, comment: Comment) -> Comment:
        pass

    @abstractmethod
    def get(self, comment_id: str) -> Optional[Comment]:
        pass

    @abstractmethod
    def list_for_video(self, video_id: str) -> List[CommentWithOwner]:
        """Comentários do vídeo com o resumo do autor (username, fullName, avatar)"""
        pass

    @abstractmethod
    def update_content(self, comment_id: str, content: str) -> Optional[Comment]:
        pass

    @abstractmethod
    def delete(self, comment_id: str) -> Optional[Comment]:
        """Remove e devolve o estado anterior; None se não existia"""
        pass

    @abstractmethod
    def delete_by_video(self, video_id: str) -> int:
        """Remove todos os comentários de um vídeo; devolve quantos"""
        pass
