# app/routers/comments.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Security

from app.core.auth import bearer_scheme, require_user
from app.core.envelope import ApiResponse, enveloped
from app.domain.models.comment import Comment, CommentIn, CommentWithOwner
from app.domain.models.user_model import UserContext
from app.routers.dependencies import get_comment_service
from app.services.comments import CommentService

router = APIRouter(
    prefix="/comments",
    tags=["comments"],
    dependencies=[Depends(require_user), Security(bearer_scheme)],
)


@router.get("/{video_id}", response_model=ApiResponse[List[CommentWithOwner]])
@enveloped("Comentários encontrados")
def list_comments(video_id: str, service: CommentService = Depends(get_comment_service)):
    return service.list_comments(video_id)


@router.post("/{video_id}", response_model=ApiResponse[Comment], status_code=201)
@enveloped("Comentário adicionado", status_code=201)
def add_comment(
    video_id: str,
    body: Optional[CommentIn] = None,
    user: UserContext = Depends(require_user),
    service: CommentService = Depends(get_comment_service),
):
    return service.add_comment(video_id, user.id, body.content if body else None)


@router.patch("/c/{comment_id}", response_model=ApiResponse[Comment])
@enveloped("Comentário atualizado")
def update_comment(
    comment_id: str,
    body: Optional[CommentIn] = None,
    service: CommentService = Depends(get_comment_service),
):
    return service.update_comment(comment_id, body.content if body else None)


@router.delete("/c/{comment_id}", response_model=ApiResponse[Comment])
@enveloped("Comentário removido")
def delete_comment(comment_id: str, service: CommentService = Depends(get_comment_service)):
    return service.delete_comment(comment_id)
