# src/content_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from content_api.config.settings import get_settings
        settings = get_settings()
        disk = settings.persistent_disk_path
    """

    # Application Settings
    app_name: str = Field(
        default="content-api",
        description="Application name"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API from a browser"
    )

    # Service data storage
    persistent_disk_path: str = Field(
        default="/uploads",
        description="Mounted persistent disk; used for service data whenever it exists"
    )

    local_storage_dir: str = Field(
        default="public/uploads",
        description="Fallback directory beneath the working tree when no disk is mounted"
    )

    services_file_name: str = Field(
        default="services-data.json",
        description="File name of the service collection document"
    )

    seed_file_path: Optional[str] = Field(
        default=None,
        description="Seed document override; defaults to the snapshot bundled with the package"
    )

    # Media uploads
    uploads_dir: str = Field(
        default="public/uploads",
        description="Local directory that receives uploaded media"
    )

    uploads_url_prefix: str = Field(
        default="/uploads",
        description="URL path under which the local uploads directory is served"
    )

    max_upload_bytes: int = Field(
        default=100 * 1024 * 1024,
        description="Upload size ceiling (100 MiB)"
    )

    allowed_content_type_prefixes: List[str] = Field(
        default=["image/", "video/"],
        description="Accepted MIME type prefixes for uploads"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="service-media",
        description="Bucket for uploaded media"
    )

    s3_access_key_id: Optional[str] = Field(
        default=None,
        description="Cloud storage credential; its presence selects the cloud backend"
    )

    s3_secret_access_key: Optional[str] = Field(
        default=None,
        description="Secret paired with s3_access_key_id"
    )

    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom endpoint for S3-compatible stores"
    )

    s3_region: str = Field(
        default="us-east-1",
        description="Region of the media bucket"
    )

    s3_public_base_url: Optional[str] = Field(
        default=None,
        description="Public base URL for objects, e.g. a CDN in front of the bucket"
    )

    s3_key_prefix: str = Field(
        default="uploads/",
        description="Key prefix for uploaded objects"
    )

    # Translation
    translator_url: Optional[str] = Field(
        default=None,
        description="Endpoint of the external machine translation service"
    )

    translator_timeout_seconds: float = Field(
        default=60.0,
        description="HTTP timeout for one call to the translator"
    )

    translation_timeout_seconds: float = Field(
        default=120.0,
        description="Upper bound for translating a single service record"
    )

    source_language: str = Field(
        default="nl",
        description="Language the canonical service fields are written in"
    )

    @field_validator("s3_key_prefix")
    @classmethod
    def normalize_key_prefix(cls, v: str) -> str:
        """Key prefixes are stored without a leading slash and with a trailing one."""
        v = v.strip("/")
        return f"{v}/" if v else ""

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
