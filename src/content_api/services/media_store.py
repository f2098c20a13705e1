"""Validate, store and delete uploaded media assets."""

import logging
import re
import time
from typing import Callable, Optional

from content_api.adapters.media import (
    LocalMediaBackend,
    MediaBackend,
    S3MediaBackend,
    cloud_credentials_configured,
)
from content_api.config.settings import Settings
from content_api.errors import ValidationError
from content_api.schemas import StoredAsset

logger = logging.getLogger(__name__)

UNSAFE_FILE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_file_name(original_name: str) -> str:
    return UNSAFE_FILE_NAME_CHARS.sub("_", original_name)


def build_file_name(original_name: str, now_ms: Optional[int] = None) -> str:
    """``{timestampMillis}_{sanitizedOriginalName}``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}_{sanitize_file_name(original_name)}"


class MediaStore:
    """
    Upload and delete media through the backend chosen for this call.

    Backends are built lazily by the factories, so a call that fails
    validation never touches either of them.
    """

    def __init__(
        self,
        settings: Settings,
        cloud_backend_factory: Optional[Callable[[], MediaBackend]] = None,
        local_backend_factory: Optional[Callable[[], MediaBackend]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.cloud_backend_factory = cloud_backend_factory or (lambda: S3MediaBackend(settings))
        self.local_backend_factory = local_backend_factory or (lambda: LocalMediaBackend(settings))
        self.clock = clock

    @property
    def uses_cloud(self) -> bool:
        return cloud_credentials_configured(self.settings)

    @property
    def backend_name(self) -> str:
        return S3MediaBackend.name if self.uses_cloud else LocalMediaBackend.name

    def validate_upload(self, size: int, content_type: str) -> None:
        max_bytes = self.settings.max_upload_bytes
        if size > max_bytes:
            raise ValidationError(
                f"File is too large. Maximum size: {max_bytes / 1024 / 1024:.0f}MB. "
                f"Your file: {size / 1024 / 1024:.2f}MB"
            )
        content_type = content_type or ""
        if not any(content_type.startswith(prefix) for prefix in self.settings.allowed_content_type_prefixes):
            raise ValidationError(
                "Unsupported file type. Only images and videos are allowed.",
                details=content_type or None,
            )

    def put(self, content: bytes, original_name: str, content_type: str, size: Optional[int] = None) -> StoredAsset:
        size = len(content) if size is None else size
        self.validate_upload(size, content_type)
        if not original_name:
            raise ValidationError("File name is missing")

        backend = self.cloud_backend_factory() if self.uses_cloud else self.local_backend_factory()
        file_name = build_file_name(original_name, int(self.clock() * 1000))
        file_name, url = backend.save(file_name, content, content_type)
        logger.info(f"Stored {file_name} via {backend.name} backend")
        return StoredAsset(file_name=file_name, url=url, size=size, content_type=content_type)

    def delete(self, file_name: Optional[str] = None, url: Optional[str] = None) -> None:
        if not file_name and not url:
            raise ValidationError("File name or URL is required")

        if self.uses_cloud and url:
            self.cloud_backend_factory().delete(url=url)
            return
        self.local_backend_factory().delete(file_name=file_name, url=url)
