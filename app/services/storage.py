# app/services/storage.py
"""
Adapter do object storage (S3): sobe um arquivo local e devolve a URL durável.

Uma chamada por asset, sem retry; qualquer falha vira StorageError e o caller
aborta a operação inteira.
"""
import logging
import mimetypes
import os
from typing import Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

import app.aws as aws_mod
from app.config import settings
from app.core.errors import StorageError
from app.core.metrics import S3_OPS, UPLOAD_BYTES
from app.utils.id_gen import new_id

logger = logging.getLogger("storage")


class StoredAsset(BaseModel):
    url: str
    key: str


def build_asset_key(local_path: str, kind: str, vid: Optional[str] = None) -> Tuple[str, str]:
    vid = vid or new_id()
    key = f"videos/{vid}/{kind}/{os.path.basename(local_path)}"
    return vid, key


def public_url(key: str) -> str:
    bucket = settings.s3_bucket
    if settings.s3_public_base_url:
        return f"{settings.s3_public_base_url.rstrip('/')}/{key}"
    if settings.aws_endpoint_url:
        # URL "estilo path" (LocalStack)
        return f"{settings.aws_endpoint_url.rstrip('/')}/{bucket}/{key}"
    return f"https://{bucket}.s3.{settings.aws_region}.amazonaws.com/{key}"


class AssetStore:
    def __init__(self, bucket: Optional[str] = None):
        self._bucket = bucket or settings.s3_bucket

    def upload(self, local_path: str, key: Optional[str] = None,
               content_type: Optional[str] = None) -> StoredAsset:
        if not local_path or not os.path.isfile(local_path):
            raise StorageError(f"Arquivo local não encontrado: {local_path}")

        key = key or build_asset_key(local_path, "assets")[1]
        content_type = content_type or mimetypes.guess_type(local_path)[0] or "application/octet-stream"
        size = os.path.getsize(local_path)
        try:
            aws_mod.s3.upload_file(
                local_path, self._bucket, key,
                ExtraArgs={"ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as e:
            S3_OPS.labels(op="put", status="error").inc()
            raise StorageError(f"Falha ao salvar no storage: {e}") from e

        S3_OPS.labels(op="put", status="ok").inc()
        UPLOAD_BYTES.inc(size)
        logger.info("Asset enviado: s3://%s/%s", self._bucket, key, extra={"size_bytes": size})
        return StoredAsset(url=public_url(key), key=key)

    def delete(self, key: str) -> bool:
        """Remoção best-effort; devolve False em vez de propagar a falha."""
        try:
            aws_mod.s3.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            S3_OPS.labels(op="delete", status="error").inc()
            logger.warning("Falha ao remover asset s3://%s/%s: %s", self._bucket, key, e)
            return False
        S3_OPS.labels(op="delete", status="ok").inc()
        return True
