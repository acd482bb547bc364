# app/config.py
from typing import Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

class Settings(BaseSettings):

    os.environ.setdefault("AUTH_BASE_URL", "http://172.17.0.1:8000")
    os.environ.setdefault("S3_BUCKET", "media-assets-bucket")
    os.environ.setdefault("MAX_UPLOAD_MB", "500")

    # Defaults "normais" (sobrepostos por env/.env)
    aws_region: str = "us-east-1"
    aws_endpoint_url: Optional[str] = None
    s3_bucket: str = "media-assets-bucket"
    # base pública das URLs dos assets (CDN); se ausente, derivada do endpoint
    s3_public_base_url: Optional[str] = None

    ddb_videos_table: str = "videos"
    ddb_comments_table: str = "comments"
    ddb_users_table: str = "users"
    ddb_comments_video_index: str = "video-index"

    upload_tmp_dir: str = "/tmp/media-uploads"
    max_upload_mb: int = 500

    # paginação
    default_page: int = 1
    default_page_limit: int = 10
    max_page_limit: int = 100

    # políticas
    cascade_delete_comments: bool = False
    toggle_max_retries: int = 10

    # Vars do Auth (obrigatório: auth_base_url)
    auth_base_url: str = Field(
        ...,
        validation_alias=AliasChoices("AUTH_BASE_URL", "auth_base_url"),
    )
    auth_timeout_seconds: int = Field(
        5,
        validation_alias=AliasChoices("AUTH_TIMEOUT_SECONDS", "auth_timeout_seconds"),
    )
    auth_cache_ttl_seconds: int = Field(
        30,
        validation_alias=AliasChoices("AUTH_CACHE_TTL_SECONDS", "auth_cache_ttl_seconds"),
    )

    # pydantic-settings v2
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",   # sem prefixo
        extra="ignore",
    )

settings = Settings()
