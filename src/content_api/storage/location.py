"""Decide which directory holds the service data document.

Nothing here is cached: every call checks the filesystem again so that a disk
mounted after start-up is picked up by the next request.
"""
from pathlib import Path

from content_api.config.settings import Settings


def resolve_storage_dir(settings: Settings) -> Path:
    """Return the mounted persistent disk if present, otherwise the local fallback."""
    disk = Path(settings.persistent_disk_path)
    if disk.exists():
        return disk
    return Path(settings.local_storage_dir)


def is_persistent(settings: Settings) -> bool:
    return resolve_storage_dir(settings) == Path(settings.persistent_disk_path)


def services_file_path(settings: Settings) -> Path:
    return resolve_storage_dir(settings) / settings.services_file_name


def ensure_storage_dir(settings: Settings) -> Path:
    """Create the resolved storage directory if needed and return it.

    Idempotent; an already existing directory is not an error.
    """
    storage_dir = resolve_storage_dir(settings)
    storage_dir.mkdir(parents=True, exist_ok=True)
    return storage_dir
