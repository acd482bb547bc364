# app/infrastructure/repositories/comment_repo.py
import logging
from typing import Dict, Iterable, List, Optional

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

import app.aws as aws_mod
from app.config import settings
from app.core.errors import PersistenceError
from app.domain import schema
from app.domain.models.comment import Comment, CommentWithOwner, OwnerSummary
from app.domain.repositories.comment_repository_interface import ICommentRepository
from app.infrastructure.repositories.dynamo import (
    ddb_call,
    is_conditional_failure,
    query_all,
    set_expression,
    to_item,
    utcnow_iso,
)

logger = logging.getLogger("repository")

# limite do BatchGetItem
_BATCH_GET_MAX = 100


def _chunks(values: List[str], size: int) -> Iterable[List[str]]:
    for i in range(0, len(values), size):
        yield values[i:i + size]


class CommentRepo(ICommentRepository):
    def __init__(self, video_index: Optional[str] = None):
        self._video_index = video_index or settings.ddb_comments_video_index

    def put(self, comment: Comment) -> Comment:
        now = utcnow_iso()
        data = comment.model_dump(mode="json")
        data[schema.CREATED_AT] = data.get(schema.CREATED_AT) or now
        data[schema.UPDATED_AT] = data.get(schema.UPDATED_AT) or now
        item = to_item(data)
        try:
            with ddb_call("put"):
                aws_mod.table_comments.put_item(Item=item, ConditionExpression=Attr(schema.ID).not_exists())
        except ClientError as e:
            if is_conditional_failure(e):
                raise PersistenceError(f"Comentário {comment.id} já existe") from e
            raise
        return Comment.model_validate(item)

    def get(self, comment_id: str) -> Optional[Comment]:
        with ddb_call("get"):
            resp = aws_mod.table_comments.get_item(Key={schema.ID: comment_id})
        item = resp.get("Item")
        return Comment.model_validate(item) if item else None

    def _items_for_video(self, video_id: str) -> List[dict]:
        return query_all(
            aws_mod.table_comments,
            IndexName=self._video_index,
            KeyConditionExpression=Key(schema.VIDEO).eq(video_id),
        )

    def list_for_video(self, video_id: str) -> List[CommentWithOwner]:
        items = sorted(
            self._items_for_video(video_id),
            key=lambda i: (i.get(schema.CREATED_AT, ""), i.get(schema.ID, "")),
        )
        owners = self._owner_summaries({i[schema.OWNER] for i in items if i.get(schema.OWNER)})
        return [
            CommentWithOwner(
                id=i[schema.ID],
                content=i[schema.CONTENT],
                video=i[schema.VIDEO],
                owner=owners.get(i.get(schema.OWNER)),
                createdAt=i.get(schema.CREATED_AT),
                updatedAt=i.get(schema.UPDATED_AT),
            )
            for i in items
        ]

    def _owner_summaries(self, owner_ids: Iterable[str]) -> Dict[str, OwnerSummary]:
        """
        Join com a tabela de usuários via BatchGetItem, projetando só os campos
        públicos do resumo (nunca o documento completo do usuário).
        """
        ids = sorted(owner_ids)
        if not ids:
            return {}

        table_name = aws_mod.table_users.name
        names = {"#id": schema.ID}
        names.update({f"#o{i}": f for i, f in enumerate(schema.OWNER_SUMMARY_FIELDS)})
        projection = ", ".join(names)

        found: Dict[str, OwnerSummary] = {}
        for chunk in _chunks(ids, _BATCH_GET_MAX):
            request = {
                table_name: {
                    "Keys": [{schema.ID: owner_id} for owner_id in chunk],
                    "ProjectionExpression": projection,
                    "ExpressionAttributeNames": names,
                }
            }
            while request:
                with ddb_call("batch_get"):
                    resp = aws_mod.ddb.batch_get_item(RequestItems=request)
                for user in resp.get("Responses", {}).get(table_name, []):
                    found[user[schema.ID]] = OwnerSummary(
                        **{f: user.get(f) for f in schema.OWNER_SUMMARY_FIELDS}
                    )
                request = resp.get("UnprocessedKeys") or None
        return found

    def update_content(self, comment_id: str, content: str) -> Optional[Comment]:
        expr, names, values = set_expression({schema.CONTENT: content, schema.UPDATED_AT: utcnow_iso()})
        try:
            with ddb_call("update"):
                resp = aws_mod.table_comments.update_item(
                    Key={schema.ID: comment_id},
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
        return Comment.model_validate(resp["Attributes"])

    def delete(self, comment_id: str) -> Optional[Comment]:
        with ddb_call("delete"):
            resp = aws_mod.table_comments.delete_item(Key={schema.ID: comment_id}, ReturnValues="ALL_OLD")
        old = resp.get("Attributes")
        return Comment.model_validate(old) if old else None

    def delete_by_video(self, video_id: str) -> int:
        ids = [i[schema.ID] for i in self._items_for_video(video_id)]
        if not ids:
            return 0
        with ddb_call("delete"):
            with aws_mod.table_comments.batch_writer() as batch:
                for comment_id in ids:
                    batch.delete_item(Key={schema.ID: comment_id})
        logger.info("%d comentário(s) removidos do vídeo %s", len(ids), video_id,
                    extra={"video_id": video_id})
        return len(ids)
