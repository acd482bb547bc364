# app/services/videos.py
import logging
import math
from typing import Any, Dict, List, Optional

from app.config import settings
from app.core.errors import NotFoundError, PartialUploadError, StorageError, ValidationError
from app.core.metrics import ASSET_COMPENSATIONS
from app.domain import schema
from app.domain.models.video import Video
from app.domain.query import build_video_query
from app.domain.repositories.comment_repository_interface import ICommentRepository
from app.domain.repositories.video_repository_interface import IVideoRepository
from app.services.storage import AssetStore, StoredAsset, build_asset_key
from app.utils.id_gen import new_id

logger = logging.getLogger("videos")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _require_id(video_id: Optional[str]) -> str:
    video_id = _clean(video_id)
    if not video_id:
        raise ValidationError("ID do vídeo ausente")
    return video_id


class VideoService:
    """Casos de uso de vídeo: listagem, publicação (upload + gravação), edição,
    remoção e alternância de publicação."""

    def __init__(
        self,
        videos: IVideoRepository,
        assets: AssetStore,
        comments: Optional[ICommentRepository] = None,
        cascade_comments: Optional[bool] = None,
    ):
        self._videos = videos
        self._assets = assets
        self._comments = comments
        self._cascade = settings.cascade_delete_comments if cascade_comments is None else cascade_comments

    def list_videos(
        self,
        page: Any = None,
        limit: Any = None,
        query: Optional[str] = None,
        user_id: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None,
    ) -> List[Video]:
        q = build_video_query(
            page, limit, query, user_id, sort_by, sort_type,
            default_page=settings.default_page,
            default_limit=settings.default_page_limit,
            max_limit=settings.max_page_limit,
        )
        return self._videos.list(q.filter, q.sort, q.offset, q.limit)

    def publish(
        self,
        *,
        title: Optional[str],
        description: Optional[str],
        owner: Optional[str],
        video_path: Optional[str],
        thumbnail_path: Optional[str],
        duration: Optional[float] = None,
    ) -> Video:
        title, description = _clean(title), _clean(description)
        if not title or not description:
            raise ValidationError("Título e descrição são obrigatórios")
        if not video_path or not thumbnail_path:
            raise ValidationError("Arquivo de vídeo e thumbnail são obrigatórios")
        owner = _clean(owner)
        if not owner:
            raise ValidationError("Dono do vídeo ausente")
        if duration is not None and (not math.isfinite(duration) or duration < 0):
            raise ValidationError("Duração inválida")

        video_id = new_id()
        uploaded: List[StoredAsset] = []
        video_file = self._upload_step(video_path, "video", video_id, uploaded)
        thumbnail = self._upload_step(thumbnail_path, "thumbnail", video_id, uploaded)

        video = Video(
            id=video_id,
            title=title,
            description=description,
            videoFile=video_file.url,
            thumbnail=thumbnail.url,
            duration=duration or 0,
            owner=owner,
            isPublished=False,
        )
        try:
            saved = self._videos.put(video)
        except Exception:
            # nenhum documento gravado: desfaz os uploads
            self._compensate(uploaded, video_id)
            raise

        logger.info("Vídeo publicado", extra={"video_id": video_id})
        return saved

    def _upload_step(self, path: str, kind: str, video_id: str, uploaded: List[StoredAsset]) -> StoredAsset:
        _, key = build_asset_key(path, kind, video_id)
        try:
            asset = self._assets.upload(path, key)
        except StorageError as e:
            if not uploaded:
                raise
            cleaned = self._compensate(uploaded, video_id)
            raise PartialUploadError(
                f"Falha no upload de {kind}; limpeza dos assets anteriores "
                f"{'concluída' if cleaned else 'falhou'}",
                cleanup_succeeded=cleaned,
                errors=[e.message],
            ) from e
        uploaded.append(asset)
        return asset

    def _compensate(self, uploaded: List[StoredAsset], video_id: str) -> bool:
        ok = True
        for asset in uploaded:
            ok = self._assets.delete(asset.key) and ok
        ASSET_COMPENSATIONS.labels(outcome="ok" if ok else "failed").inc()
        if not ok:
            logger.error("Assets órfãos no storage: %s", [a.key for a in uploaded],
                         extra={"video_id": video_id})
        return ok

    def get_video(self, video_id: Optional[str]) -> Video:
        video_id = _clean(video_id)
        if not video_id:
            raise NotFoundError("ID do vídeo ausente")
        video = self._videos.get(video_id)
        if video is None:
            raise NotFoundError("Vídeo não encontrado")
        return video

    def update_video(
        self,
        video_id: Optional[str],
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_path: Optional[str] = None,
    ) -> Video:
        video_id = _require_id(video_id)
        title, description = _clean(title), _clean(description)
        if not title and not description:
            raise ValidationError("Informe título ou descrição")

        # antes do upload, para não subir thumbnail de vídeo inexistente
        if self._videos.get(video_id) is None:
            raise NotFoundError("Vídeo não encontrado")

        fields: Dict[str, Any] = {schema.TITLE: title, schema.DESCRIPTION: description}
        new_thumb: Optional[StoredAsset] = None
        if thumbnail_path:
            _, key = build_asset_key(thumbnail_path, "thumbnail", video_id)
            try:
                new_thumb = self._assets.upload(thumbnail_path, key)
            except StorageError as e:
                raise ValidationError("Falha no upload da thumbnail", [e.message]) from e
            fields[schema.THUMBNAIL] = new_thumb.url

        updated = self._videos.update_fields(video_id, fields)
        if updated is None:
            if new_thumb is not None:
                self._assets.delete(new_thumb.key)
            raise NotFoundError("Vídeo não encontrado")
        return updated

    def delete_video(self, video_id: Optional[str]) -> Dict[str, Any]:
        video_id = _require_id(video_id)
        cascade = self._cascade and self._comments is not None
        # comentários saem antes do vídeo: se falharem, o vídeo continua lá
        if cascade and self._videos.get(video_id) is None:
            raise NotFoundError("Vídeo não encontrado")
        removed = self._comments.delete_by_video(video_id) if cascade else 0

        deleted = self._videos.delete(video_id)
        if deleted is None:
            raise NotFoundError("Vídeo não encontrado")
        logger.info("Vídeo removido", extra={"video_id": video_id})
        return {"id": video_id, "commentsDeleted": removed}

    def toggle_publish(self, video_id: Optional[str]) -> Video:
        video_id = _require_id(video_id)
        video = self._videos.toggle_published(video_id)
        if video is None:
            raise NotFoundError("Vídeo não encontrado")
        return video
