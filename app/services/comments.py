# app/services/comments.py
import logging
from typing import List, Optional

from app.core.errors import NotFoundError, ValidationError
from app.domain.models.comment import Comment, CommentWithOwner
from app.domain.repositories.comment_repository_interface import ICommentRepository
from app.utils.id_gen import new_id

logger = logging.getLogger("comments")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class CommentService:
    def __init__(self, comments: ICommentRepository):
        self._comments = comments

    def add_comment(self, video_id: Optional[str], owner: Optional[str], content: Optional[str]) -> Comment:
        video_id, owner = _clean(video_id), _clean(owner)
        if not video_id or not owner:
            raise ValidationError("ID do vídeo ou do autor ausente")
        content = _clean(content)
        if not content:
            raise ValidationError("Comentário não pode ser vazio")

        comment = self._comments.put(Comment(id=new_id(), content=content, video=video_id, owner=owner))
        logger.info("Comentário criado", extra={"comment_id": comment.id, "video_id": video_id})
        return comment

    def list_comments(self, video_id: Optional[str]) -> List[CommentWithOwner]:
        video_id = _clean(video_id)
        if not video_id:
            raise ValidationError("ID do vídeo ausente")
        return self._comments.list_for_video(video_id)

    def update_comment(self, comment_id: Optional[str], content: Optional[str]) -> Comment:
        comment_id = _clean(comment_id)
        if not comment_id:
            raise ValidationError("ID do comentário ausente")
        content = _clean(content)
        if not content:
            raise ValidationError("Escreva algo para atualizar")

        updated = self._comments.update_content(comment_id, content)
        if updated is None:
            raise NotFoundError("Comentário não encontrado")
        return updated

    def delete_comment(self, comment_id: Optional[str]) -> Comment:
        comment_id = _clean(comment_id)
        if not comment_id:
            raise ValidationError("ID do comentário ausente")

        deleted = self._comments.delete(comment_id)
        if deleted is None:
            raise NotFoundError("Comentário não encontrado")
        logger.info("Comentário removido", extra={"comment_id": comment_id})
        return deleted
