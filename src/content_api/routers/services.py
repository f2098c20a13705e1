import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from content_api.dependencies import get_record_store, get_translation_gate
from content_api.errors import ServiceNotFoundError
from content_api.schemas import (
    ErrorResponse,
    ServiceContent,
    ServiceRecord,
    TranslationReport,
)
from content_api.services.translation_gate import TranslationGate
from content_api.storage.records import ServiceRecordStore

router = APIRouter()


@router.get("/services", response_model=List[ServiceRecord], response_model_by_alias=True,
            response_model_exclude_none=True)
async def list_services(store: ServiceRecordStore = Depends(get_record_store)):
    """Return the whole service collection in display order."""
    return await asyncio.to_thread(store.read)


@router.get(
    "/services/{service_id}",
    response_model=ServiceContent,
    responses={404: {"model": ErrorResponse}},
)
async def get_service(
    service_id: str,
    lang: Optional[str] = Query(None, description="Language code; falls back to the source text"),
    store: ServiceRecordStore = Depends(get_record_store),
):
    """Return one service page's content in the requested language."""
    for service in await asyncio.to_thread(store.read):
        if service.id == service_id:
            return service.display_content(lang) if lang else service.source_content()
    raise ServiceNotFoundError(service_id)


@router.api_route(
    "/services-translate",
    methods=["GET", "POST"],
    response_model=TranslationReport,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def translate_services(
    force: bool = Query(False, description="Re-translate even complete records"),
    service_id: Optional[str] = Query(None, alias="id", description="Limit the run to one service"),
    gate: TranslationGate = Depends(get_translation_gate),
) -> TranslationReport:
    """
    Translate every service that is missing languages.

    POST is accepted as an alias of GET; re-running after a complete run does nothing
    unless `force` is set.
    """
    return await gate.translate_missing(service_id=service_id, force=force)
