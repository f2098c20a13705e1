"""
Read and write the service collection as a single JSON document.

Reads never fail: the primary document is tried first, then the seed snapshot
bundled with the package (copied back to the primary location so the next read
hits it), and finally an empty collection. A primary document that parses but
fails validation is never overwritten.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

import pydantic

from content_api.config.settings import Settings
from content_api.errors import StorageWriteError
from content_api.schemas import ServiceRecord, dump_collection
from content_api.storage.location import ensure_storage_dir, services_file_path
from content_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

BUNDLED_SEED_FILE = Path(__file__).resolve().parent.parent / "data" / "services-data.json"


class ReadOutcome(str, Enum):
    """Where the collection returned by a read came from."""
    PRIMARY = "primary"
    SEEDED = "seeded"
    # The primary document is readable JSON but not a service collection.
    INVALID = "invalid"
    EMPTY = "empty"


@dataclass
class ReadResult:
    services: List[ServiceRecord]
    outcome: ReadOutcome
    seed_written: bool = False
    error: Optional[str] = None


class InvalidCollectionError(Exception):
    """Parsed JSON that does not describe a list of service records."""


def _parse_collection(raw: str) -> List[ServiceRecord]:
    """
    :raises ValueError: if `raw` is not JSON.
    :raises InvalidCollectionError: if the JSON is not a service collection.
    """
    data = json.loads(raw)
    # The seed snapshot wraps the list as {"services": [...]}
    if isinstance(data, dict):
        data = data.get("services", [])
    if not isinstance(data, list):
        raise InvalidCollectionError(f"Expected a list of services, got {type(data).__name__}")
    try:
        return [ServiceRecord.model_validate(item) for item in data]
    except pydantic.ValidationError as e:
        raise InvalidCollectionError(str(e)) from e


class ServiceRecordStore:
    """Owns the persisted service collection. Stateless between calls."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def seed_path(self) -> Path:
        if self.settings.seed_file_path:
            return Path(self.settings.seed_file_path)
        return BUNDLED_SEED_FILE

    @property
    def path(self) -> Path:
        return services_file_path(self.settings)

    def read(self) -> List[ServiceRecord]:
        return self.read_with_outcome().services

    def read_with_outcome(self, seed_write: bool = True) -> ReadResult:
        """Load the collection without ever raising.

        A missing or unparsable primary document falls back to the seed, which
        is then saved to the primary location unless `seed_write` is False. A
        primary document that parses but does not validate is never
        overwritten: the seed is served in its place and the outcome is
        `INVALID`.
        """
        primary = self.path
        primary_invalid = False
        try:
            services = _parse_collection(primary.read_text(encoding="utf-8"))
            return ReadResult(services=services, outcome=ReadOutcome.PRIMARY)
        except InvalidCollectionError as invalid_error:
            logger.error(f"Service data at {primary} does not validate; leaving it untouched: {invalid_error}")
            primary_message = str(invalid_error)
            primary_invalid = True
        except (OSError, ValueError) as primary_error:
            logger.info(f"Primary service data unavailable at {primary} ({primary_error}); using seed")
            primary_message = str(primary_error)

        try:
            services = _parse_collection(self.seed_path.read_text(encoding="utf-8"))
        except (OSError, ValueError, InvalidCollectionError) as seed_error:
            logger.error(
                f"Could not read service data from {primary} or seed {self.seed_path}: "
                f"{primary_message}; {seed_error}"
            )
            return ReadResult(
                services=[],
                outcome=ReadOutcome.INVALID if primary_invalid else ReadOutcome.EMPTY,
                error=f"{primary_message}; {seed_error}",
            )

        if primary_invalid:
            return ReadResult(services=services, outcome=ReadOutcome.INVALID, error=primary_message)

        seed_written = False
        if seed_write:
            try:
                self.write(services)
                seed_written = True
            except StorageWriteError as seed_write_error:
                logger.warning(f"Could not save seed data to {primary}: {seed_write_error.details}")
        return ReadResult(
            services=services,
            outcome=ReadOutcome.SEEDED,
            seed_written=seed_written,
            error=primary_message,
        )

    @log_execution_time
    def write(self, services: List[ServiceRecord]) -> None:
        """Replace the persisted collection.

        The document is written to a temporary file next to the target and
        renamed over it, so readers never observe a half-written file.

        :raises StorageWriteError: if the directory or the file cannot be written.
        """
        target = self.path
        try:
            ensure_storage_dir(self.settings)
            payload = json.dumps(dump_collection(services), indent=2, ensure_ascii=False)
            fd, tmp_name = tempfile.mkstemp(prefix=".services-", suffix=".tmp", dir=target.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                    tmp_file.write(payload)
                os.replace(tmp_name, target)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageWriteError(str(target), e) from e
        logger.info(f"Saved {len(services)} service(s) to {target}")
