# app/routers/dependencies.py
from fastapi import Depends

from app.domain.repositories.comment_repository_interface import ICommentRepository
from app.domain.repositories.video_repository_interface import IVideoRepository
from app.infrastructure.repositories.comment_repo import CommentRepo
from app.infrastructure.repositories.video_repo import VideoRepo
from app.services.comments import CommentService
from app.services.storage import AssetStore
from app.services.videos import VideoService


def get_video_repo() -> IVideoRepository:
    return VideoRepo()


def get_comment_repo() -> ICommentRepository:
    return CommentRepo()


def get_asset_store() -> AssetStore:
    return AssetStore()


def get_video_service(
    repo: IVideoRepository = Depends(get_video_repo),
    assets: AssetStore = Depends(get_asset_store),
    comments: ICommentRepository = Depends(get_comment_repo),
) -> VideoService:
    return VideoService(repo, assets, comments)


def get_comment_service(repo: ICommentRepository = Depends(get_comment_repo)) -> CommentService:
    return CommentService(repo)
