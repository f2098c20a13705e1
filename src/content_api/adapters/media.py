"""
Media backends: an S3-compatible bucket or a local uploads directory.

Which one is used is decided per call by `cloud_credentials_configured`; the
same build therefore runs unchanged on hosts with a read-only filesystem (where
a cloud credential is configured) and on a developer machine (where it is not).
"""

import errno
import logging
import os
import secrets
import tempfile
from pathlib import Path
from typing import Callable, Optional, Protocol
from urllib.parse import unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from content_api.config.settings import Settings
from content_api.errors import AssetNotFoundError, BackendError, ReadOnlyStorageError, ValidationError
from content_api.s3.delete_objects import delete_s3_object
from content_api.s3.read_objects import object_exists_in_s3
from content_api.s3.write_objects import upload_s3_object

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)

READ_ONLY_ERRNOS = {errno.EROFS, errno.EACCES, errno.EPERM}


def cloud_credentials_configured(settings: Settings) -> bool:
    """Credential presence is the only switch between the two backends."""
    return bool(settings.s3_access_key_id and settings.s3_secret_access_key)


def disambiguate(file_name: str, exists: Callable[[str], bool]) -> str:
    """Append a short random suffix while `file_name` is already taken."""
    candidate = file_name
    stem, dot, ext = file_name.rpartition(".")
    if not dot:
        stem, ext = file_name, ""
    while exists(candidate):
        candidate = f"{stem}_{secrets.token_hex(3)}{dot}{ext}"
    return candidate


class MediaBackend(Protocol):
    name: str

    def save(self, file_name: str, content: bytes, content_type: str) -> tuple[str, str]:
        """Persist the bytes and return ``(file_name, url)`` once the write is complete."""

    def delete(self, file_name: Optional[str] = None, url: Optional[str] = None) -> None: ...


class S3MediaBackend:
    name = "s3"

    def __init__(self, settings: Settings, s3_client: Optional["S3Client"] = None):
        self.bucket_name = settings.s3_bucket_name
        self.key_prefix = settings.s3_key_prefix
        self.endpoint_url = settings.s3_endpoint_url
        self.region = settings.s3_region
        self.public_base_url = settings.s3_public_base_url
        self.s3_client = s3_client or boto3.client(
            "s3",
            region_name=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.s3_access_key_id,
            aws_secret_access_key=settings.s3_secret_access_key,
        )

    def object_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def key_from_url(self, url: str) -> str:
        """Recover the object key from a URL produced by `object_url`."""
        path = unquote(urlparse(url).path).lstrip("/")
        if self.public_base_url:
            base_path = urlparse(self.public_base_url).path.strip("/")
            if base_path and path.startswith(f"{base_path}/"):
                path = path[len(base_path) + 1:]
        elif self.endpoint_url and path.startswith(f"{self.bucket_name}/"):
            path = path[len(self.bucket_name) + 1:]
        if not path:
            raise ValidationError("Cannot determine the object key from the URL", details=url)
        return path

    def save(self, file_name: str, content: bytes, content_type: str) -> tuple[str, str]:
        try:
            file_name = disambiguate(
                file_name,
                lambda name: object_exists_in_s3(self.bucket_name, f"{self.key_prefix}{name}", self.s3_client),
            )
            key = f"{self.key_prefix}{file_name}"
            upload_s3_object(
                bucket_name=self.bucket_name,
                object_key=key,
                file_content=content,
                s3_client=self.s3_client,
                content_type=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading {file_name} to S3: {e}")
            raise BackendError("Failed to upload file to cloud storage", details=str(e)) from e
        logger.info(f"Uploaded {file_name} to s3://{self.bucket_name}/{key}")
        return file_name, self.object_url(key)

    def delete(self, file_name: Optional[str] = None, url: Optional[str] = None) -> None:
        if not url:
            raise ValidationError("URL is required to delete from cloud storage")
        key = self.key_from_url(url)
        try:
            delete_s3_object(self.bucket_name, key, self.s3_client)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error deleting s3://{self.bucket_name}/{key}: {e}")
            raise BackendError("Failed to delete file from cloud storage", details=str(e)) from e
        logger.info(f"Deleted s3://{self.bucket_name}/{key}")


class LocalMediaBackend:
    name = "local"

    def __init__(self, settings: Settings):
        self.uploads_dir = Path(settings.uploads_dir)
        self.url_prefix = settings.uploads_url_prefix.rstrip("/")

    def save(self, file_name: str, content: bytes, content_type: str) -> tuple[str, str]:
        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            file_name = disambiguate(file_name, lambda name: (self.uploads_dir / name).exists())
            fd, tmp_name = tempfile.mkstemp(prefix=".upload-", dir=self.uploads_dir)
            try:
                with os.fdopen(fd, "wb") as tmp_file:
                    tmp_file.write(content)
                os.replace(tmp_name, self.uploads_dir / file_name)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error(f"Error writing {file_name} to {self.uploads_dir}: {e}")
            if e.errno in READ_ONLY_ERRNOS or "read-only" in str(e).lower():
                raise ReadOnlyStorageError(details=str(e)) from e
            raise BackendError("Failed to save file", details=str(e)) from e
        logger.info(f"Saved upload {file_name} ({len(content)} bytes) to {self.uploads_dir}")
        return file_name, f"{self.url_prefix}/{file_name}"

    def file_name_from_url(self, url: str) -> Optional[str]:
        path = unquote(urlparse(url).path)
        if path.startswith(f"{self.url_prefix}/"):
            return Path(path).name or None
        return None

    def delete(self, file_name: Optional[str] = None, url: Optional[str] = None) -> None:
        if not file_name and url:
            file_name = self.file_name_from_url(url)
        if not file_name:
            raise ValidationError("File name is required")
        # Only the base name counts; "../" cannot leave the uploads directory.
        target = self.uploads_dir / Path(file_name).name
        try:
            target.unlink()
        except FileNotFoundError as e:
            raise AssetNotFoundError(file_name) from e
        except OSError as e:
            logger.error(f"Error deleting {target}: {e}")
            raise BackendError("Failed to delete file", details=str(e)) from e
        logger.info(f"Deleted upload {target}")
