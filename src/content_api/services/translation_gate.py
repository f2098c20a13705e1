"""Decide which service records need translating, translate them, persist once."""

import asyncio
import logging
from typing import Dict, List, Optional

from content_api.errors import ServiceNotFoundError, StorageReadError, TranslationError
from content_api.schemas import (
    RecordOutcome,
    ServiceContent,
    ServiceRecord,
    TranslationReport,
)
from content_api.services.translator import Translator
from content_api.storage.records import ReadOutcome, ServiceRecordStore
from content_api.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)


def select_candidates(services: List[ServiceRecord], force: bool) -> List[ServiceRecord]:
    if force:
        return list(services)
    return [service for service in services if not service.is_translation_complete()]


class TranslationGate:
    """
    Fill in missing translations for the service collection.

    Each candidate is translated independently; a failure or timeout for one
    record is logged and reported but never stops the others. The collection
    is written back exactly once, after every attempt has finished.
    """

    def __init__(
        self,
        store: ServiceRecordStore,
        translator: Translator,
        timeout: Optional[float] = None,
    ):
        self.store = store
        self.translator = translator
        self.timeout = timeout

    @async_log_execution_time
    async def translate_missing(
        self, service_id: Optional[str] = None, force: bool = False
    ) -> TranslationReport:
        result = await asyncio.to_thread(self.store.read_with_outcome)
        if result.outcome == ReadOutcome.INVALID:
            raise StorageReadError(str(self.store.path), result.error)
        services = result.services

        working_set = services
        if service_id:
            working_set = [service for service in services if service.id == service_id]
            if not working_set:
                raise ServiceNotFoundError(service_id)

        candidates = select_candidates(working_set, force)
        if not candidates:
            suffix = f" for service {service_id}" if service_id else ""
            return TranslationReport(
                message=f"All services are already translated{suffix}",
                count=len(working_set),
            )

        logger.info(f"Translating {len(candidates)} service(s)...")
        results = await asyncio.gather(
            *(self._translate_one(service) for service in candidates)
        )

        outcomes: List[RecordOutcome] = []
        for service, (bundle, error) in zip(candidates, results):
            if bundle is not None:
                # Replaces the whole map; languages missing from the bundle are dropped.
                service.translations = bundle
            outcomes.append(
                RecordOutcome(
                    id=service.id,
                    success=error is None,
                    has_translations=service.translations is not None,
                    translations_count=service.translations_count(),
                    error=error,
                )
            )

        # Candidates are the same objects as in `services`, so this persists the updates.
        await asyncio.to_thread(self.store.write, services)

        succeeded = sum(1 for outcome in outcomes if outcome.success)
        return TranslationReport(
            message=f"Translated {len(candidates)} service(s)",
            count=len(candidates),
            succeeded=succeeded,
            failed=len(outcomes) - succeeded,
            services=outcomes,
        )

    async def _translate_one(self, service: ServiceRecord):
        """Return ``(bundle, None)`` on success or ``(None, error message)``."""
        logger.info(f"Translating service: {service.id}")
        try:
            raw = await asyncio.wait_for(self.translator(service.source_content()), timeout=self.timeout)
            bundle = _validate_bundle(raw)
        except asyncio.TimeoutError:
            logger.error(f"Translating service {service.id} timed out after {self.timeout}s")
            return None, f"Timed out after {self.timeout}s"
        except Exception as e:  # pylint: disable=broad-except
            logger.error(f"Error translating service {service.id}: {e}")
            return None, str(e) or type(e).__name__
        return bundle, None


def _validate_bundle(raw) -> Dict[str, ServiceContent]:
    if not isinstance(raw, dict):
        raise TranslationError(f"Translator returned {type(raw).__name__}, expected a mapping")
    try:
        return {
            language: ServiceContent.model_validate(entry)
            for language, entry in raw.items()
        }
    except ValueError as e:
        raise TranslationError(f"Invalid translation bundle: {e}") from e
