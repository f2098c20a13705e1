import asyncio

from fastapi import APIRouter, Depends

from content_api.dependencies import get_media_store, get_record_store
from content_api.services.media_store import MediaStore
from content_api.storage.location import is_persistent, resolve_storage_dir
from content_api.storage.records import ReadOutcome, ServiceRecordStore

router = APIRouter()


@router.get("/health")
async def health_check(
    store: ServiceRecordStore = Depends(get_record_store),
    media_store: MediaStore = Depends(get_media_store),
):
    """
    Health check endpoint for monitoring API status and storage readiness.

    Reports where service data is read from and which media backend uploads go to.
    An empty read (neither the data file nor the seed could be loaded) or a data
    file that fails validation marks the service as degraded.
    """
    # Reporting must not create or repair the data file.
    result = await asyncio.to_thread(store.read_with_outcome, seed_write=False)
    return {
        "status": "degraded" if result.outcome in (ReadOutcome.EMPTY, ReadOutcome.INVALID) else "ok",
        "storage": {
            "directory": str(resolve_storage_dir(store.settings)),
            "persistent": is_persistent(store.settings),
            "read_outcome": result.outcome.value,
            "services": len(result.services),
        },
        "media_backend": media_store.backend_name,
    }
