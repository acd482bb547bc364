import os
import pytest

from fakes import FakeDynamoResource, FakeS3, InMemoryTable

# Credenciais "dummy": nada nos testes fala com a AWS de verdade
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

import app.aws as aws_mod  # noqa: E402


@pytest.fixture
def videos_table():
    return InMemoryTable("videos")


@pytest.fixture
def comments_table():
    return InMemoryTable("comments")


@pytest.fixture
def users_table():
    return InMemoryTable("users")


@pytest.fixture
def fake_ddb(videos_table, comments_table, users_table):
    return FakeDynamoResource(videos_table, comments_table, users_table)


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def patch_aws(monkeypatch, fake_ddb, fake_s3, videos_table, comments_table, users_table):
    """
    Substitui tabelas e clients de `app.aws` pelos fakes em memória.
    Os repositórios leem `aws_mod.<attr>` a cada chamada, então o patch vale.
    """
    monkeypatch.setattr(aws_mod, "table_videos", videos_table)
    monkeypatch.setattr(aws_mod, "table_comments", comments_table)
    monkeypatch.setattr(aws_mod, "table_users", users_table)
    monkeypatch.setattr(aws_mod, "ddb", fake_ddb)
    monkeypatch.setattr(aws_mod, "s3", fake_s3)
    return aws_mod


@pytest.fixture
def upload_dir(monkeypatch, tmp_path):
    from app.config import settings
    d = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_tmp_dir", str(d), raising=False)
    return d


@pytest.fixture
def make_file(tmp_path):
    def _make(name: str, data: bytes = b"\x00\x01\x02") -> str:
        p = tmp_path / name
        p.write_bytes(data)
        return str(p)
    return _make
