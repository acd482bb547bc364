# app/infrastructure/repositories/video_repo.py
import functools
import logging
import operator
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

import app.aws as aws_mod   # <-- importe o módulo, não o símbolo
from app.config import settings
from app.core.errors import PersistenceError
from app.core.metrics import TOGGLE_CONFLICTS
from app.domain import schema
from app.domain.models.video import Video
from app.domain.query import ByOwner, ByTextMatch, Combined, MatchAll, SortSpec, VideoFilter
from app.domain.repositories.video_repository_interface import IVideoRepository
from app.infrastructure.repositories.dynamo import (
    ddb_call,
    is_conditional_failure,
    scan_all,
    set_expression,
    to_item,
    utcnow_iso,
)

logger = logging.getLogger("repository")


def to_condition(spec: VideoFilter):
    """Converte o filtro do query builder numa condição boto3 (None = sem filtro)."""
    if isinstance(spec, MatchAll):
        return None
    if isinstance(spec, ByOwner):
        return Attr(spec.field).eq(spec.owner_id)
    if isinstance(spec, ByTextMatch):
        conds = [Attr(schema.SEARCH_SHADOWS[f]).contains(spec.text) for f in spec.fields]
        return functools.reduce(operator.or_, conds)
    if isinstance(spec, Combined):
        conds = [c for c in (to_condition(p) for p in spec.parts) if c is not None]
        return functools.reduce(operator.and_, conds) if conds else None
    raise TypeError(f"filtro desconhecido: {spec!r}")


def _with_search_shadows(fields: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(fields)
    for field, shadow in schema.SEARCH_SHADOWS.items():
        if fields.get(field) is not None:
            out[shadow] = str(fields[field]).lower()
    return out


def _sort_items(items: List[dict], sort: SortSpec) -> List[dict]:
    # desempate estável por id; ausentes vão para o fim na ordem ascendente
    items = sorted(items, key=lambda i: i.get(schema.ID, ""))
    return sorted(
        items,
        key=lambda i: (i.get(sort.field) is None, i.get(sort.field) if i.get(sort.field) is not None else ""),
        reverse=sort.descending,
    )


class VideoRepo(IVideoRepository):
    def __init__(self, toggle_max_retries: Optional[int] = None):
        self._toggle_max_retries = toggle_max_retries or settings.toggle_max_retries

    def list(self, spec: VideoFilter, sort: SortSpec, offset: int, limit: int) -> List[Video]:
        """
        Scan + Filter e ordenação em memória; troque por Query com GSI para produção.
        """
        kwargs: Dict[str, Any] = {}
        condition = to_condition(spec)
        if condition is not None:
            kwargs["FilterExpression"] = condition

        items = _sort_items(scan_all(aws_mod.table_videos, **kwargs), sort)
        return [Video.model_validate(i) for i in items[offset:offset + limit]]

    def put(self, video: Video) -> Video:
        now = utcnow_iso()
        data = video.model_dump(mode="json")
        data[schema.CREATED_AT] = data.get(schema.CREATED_AT) or now
        data[schema.UPDATED_AT] = data.get(schema.UPDATED_AT) or now
        item = to_item(_with_search_shadows(data))

        try:
            with ddb_call("put"):
                aws_mod.table_videos.put_item(
                    Item=item,
                    ConditionExpression=Attr(schema.ID).not_exists(),
                )
        except ClientError as e:
            if is_conditional_failure(e):
                raise PersistenceError(f"Vídeo {video.id} já existe") from e
            raise
        return Video.model_validate(item)

    def get(self, video_id: str) -> Optional[Video]:
        item = self._get_item(video_id)
        return Video.model_validate(item) if item else None

    def _get_item(self, video_id: str, consistent: bool = False) -> Optional[dict]:
        with ddb_call("get"):
            resp = aws_mod.table_videos.get_item(Key={schema.ID: video_id}, ConsistentRead=consistent)
        return resp.get("Item")

    def update_fields(self, video_id: str, fields: Dict[str, Any]) -> Optional[Video]:
        fields = _with_search_shadows({k: v for k, v in fields.items() if v is not None})
        fields[schema.UPDATED_AT] = utcnow_iso()
        expr, names, values = set_expression(fields)
        try:
            with ddb_call("update"):
                resp = aws_mod.table_videos.update_item(
                    Key={schema.ID: video_id},
                    UpdateExpression=expr,
                    ExpressionAttributeNames=names,
                    ExpressionAttributeValues=values,
                    ConditionExpression=Attr(schema.ID).exists(),
                    ReturnValues="ALL_NEW",
                )
        except ClientError as e:
            if is_conditional_failure(e):
                return None
            raise
        return Video.model_validate(resp["Attributes"])

    def delete(self, video_id: str) -> Optional[Video]:
        with ddb_call("delete"):
            resp = aws_mod.table_videos.delete_item(Key={schema.ID: video_id}, ReturnValues="ALL_OLD")
        old = resp.get("Attributes")
        return Video.model_validate(old) if old else None

    def toggle_published(self, video_id: str) -> Optional[Video]:
        """
        Compare-and-swap: só grava o valor invertido se ninguém mudou
        isPublished desde a leitura; senão relê e tenta de novo.
        """
        for attempt in range(1, self._toggle_max_retries + 1):
            current = self._get_item(video_id, consistent=True)
            if current is None:
                return None
            was = bool(current.get(schema.IS_PUBLISHED, False))
            unchanged = Attr(schema.IS_PUBLISHED).eq(was)
            if not was:
                # item sem o atributo conta como não publicado
                unchanged = Attr(schema.IS_PUBLISHED).not_exists() | unchanged
            try:
                with ddb_call("update"):
                    resp = aws_mod.table_videos.update_item(
                        Key={schema.ID: video_id},
                        UpdateExpression="SET #p = :new, #u = :now",
                        ExpressionAttributeNames={"#p": schema.IS_PUBLISHED, "#u": schema.UPDATED_AT},
                        ExpressionAttributeValues={":new": not was, ":now": utcnow_iso()},
                        ConditionExpression=Attr(schema.ID).exists() & unchanged,
                        ReturnValues="ALL_NEW",
                    )
            except ClientError as e:
                if not is_conditional_failure(e):
                    raise
                TOGGLE_CONFLICTS.inc()
                logger.info("Toggle concorrente em %s (tentativa %d)", video_id, attempt,
                            extra={"video_id": video_id})
                continue
            return Video.model_validate(resp["Attributes"])

        raise PersistenceError(
            "Conflito ao alternar publicação do vídeo",
            [{"video_id": video_id, "attempts": self._toggle_max_retries}],
        )
