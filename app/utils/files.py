# app/utils/files.py
import os
import shutil
import tempfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from fastapi import UploadFile

from app.config import settings
from app.core.errors import ValidationError

_CHUNK = 1024 * 1024


def _copy_limited(src: BinaryIO, dst: BinaryIO, max_bytes: int) -> int:
    total = 0
    while True:
        chunk = src.read(_CHUNK)
        if not chunk:
            return total
        total += len(chunk)
        if total > max_bytes:
            raise ValidationError(f"Arquivo excede limite de {settings.max_upload_mb}MB")
        dst.write(chunk)


@contextmanager
def spooled_to_disk(upload: Optional[UploadFile]) -> Iterator[Optional[str]]:
    """Grava o upload multipart num caminho local temporário, removido na saída."""
    if upload is None or not upload.filename:
        yield None
        return

    os.makedirs(settings.upload_tmp_dir, exist_ok=True)
    workdir = tempfile.mkdtemp(dir=settings.upload_tmp_dir)
    path = os.path.join(workdir, os.path.basename(upload.filename))
    try:
        with open(path, "wb") as out:
            _copy_limited(upload.file, out, settings.max_upload_mb * 1024 * 1024)
        yield path
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
