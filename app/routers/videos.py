# app/routers/videos.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Security, UploadFile
from fastapi.security import HTTPAuthorizationCredentials

from app.core.auth import bearer_scheme, require_user
from app.core.envelope import ApiResponse, enveloped
from app.domain.models.user_model import UserContext
from app.domain.models.video import Video
from app.routers.dependencies import get_video_service
from app.services.videos import VideoService
from app.utils.files import spooled_to_disk

router = APIRouter(
    prefix="/videos",
    tags=["videos"],
    dependencies=[Depends(require_user), Security(bearer_scheme)],  # expõe o esquema no OpenAPI
)


@router.get("", response_model=ApiResponse[List[Video]])
@enveloped("Vídeos encontrados")
def list_videos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    query: Optional[str] = Query(None),
    sortBy: Optional[str] = Query(None),
    sortType: Optional[str] = Query(None),
    userId: Optional[str] = Query(None),
    service: VideoService = Depends(get_video_service),
):
    return service.list_videos(page, limit, query, userId, sortBy, sortType)


@router.post("", response_model=ApiResponse[Video], status_code=201)
@enveloped("Vídeo publicado com sucesso", status_code=201)
def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    duration: Optional[float] = Form(None),
    videoFile: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    user: UserContext = Depends(require_user),
    service: VideoService = Depends(get_video_service),
):
    with spooled_to_disk(videoFile) as video_path, spooled_to_disk(thumbnail) as thumbnail_path:
        return service.publish(
            title=title,
            description=description,
            owner=user.id,
            video_path=video_path,
            thumbnail_path=thumbnail_path,
            duration=duration,
        )


@router.get("/{video_id}", response_model=ApiResponse[Video])
@enveloped("Vídeo encontrado")
def get_video(video_id: str, service: VideoService = Depends(get_video_service)):
    return service.get_video(video_id)


@router.patch("/{video_id}", response_model=ApiResponse[Video])
@enveloped("Vídeo atualizado")
def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    service: VideoService = Depends(get_video_service),
):
    with spooled_to_disk(thumbnail) as thumbnail_path:
        return service.update_video(
            video_id, title=title, description=description, thumbnail_path=thumbnail_path,
        )


@router.delete("/{video_id}", response_model=ApiResponse[Dict[str, Any]])
@enveloped("Vídeo removido com sucesso")
def delete_video(video_id: str, service: VideoService = Depends(get_video_service)):
    return service.delete_video(video_id)


@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse[Video])
@enveloped("Publicação atualizada")
def toggle_publish(video_id: str, service: VideoService = Depends(get_video_service)):
    return service.toggle_publish(video_id)
