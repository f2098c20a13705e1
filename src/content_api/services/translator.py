"""
Client for the external machine translation service.

The gate only relies on the `Translator` signature: an async callable taking
the source content of one record and returning a bundle keyed by language
code. `HttpTranslator` is the implementation wired into the app; tests and
scripts can pass any other coroutine function.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, Optional

import requests

from content_api.config.settings import Settings
from content_api.errors import TranslationError, TranslatorNotConfiguredError
from content_api.schemas import SUPPORTED_LANGUAGES, ServiceContent
from content_api.utils.decorators import retry

logger = logging.getLogger(__name__)

Translator = Callable[[ServiceContent], Awaitable[Dict[str, dict]]]


class HttpTranslator:
    """Translate a service page by POSTing it to a translation endpoint.

    Request body::

        {"source": "nl", "targets": ["nl", "en", ...], "content": {...}}

    The endpoint answers with ``{"translations": {"en": {...}, ...}}`` (a bare
    mapping is accepted as well).
    """

    def __init__(
        self,
        url: Optional[str],
        source_language: str = "nl",
        timeout: float = 60.0,
        languages: Iterable[str] = SUPPORTED_LANGUAGES,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.source_language = source_language
        self.timeout = timeout
        self.languages = list(languages)
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpTranslator":
        return cls(
            url=settings.translator_url,
            source_language=settings.source_language,
            timeout=settings.translator_timeout_seconds,
        )

    async def __call__(self, content: ServiceContent) -> Dict[str, dict]:
        if not self.url:
            raise TranslatorNotConfiguredError("TRANSLATOR_URL is not set")
        # requests is blocking; keep the event loop free for the other records
        return await asyncio.to_thread(self._translate, content)

    @retry(max_attempts=3, delay=1.0, exceptions=(requests.ConnectionError, requests.Timeout))
    def _post(self, payload: dict) -> requests.Response:
        logger.debug(f"POST {self.url} for {len(self.languages)} language(s)")
        return self.session.post(self.url, json=payload, timeout=self.timeout)

    def _translate(self, content: ServiceContent) -> Dict[str, dict]:
        payload = {
            "source": self.source_language,
            "targets": self.languages,
            "content": content.model_dump(by_alias=True),
        }
        try:
            response = self._post(payload)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TranslationError(f"Translator request failed: {e}") from e

        bundle = body.get("translations", body) if isinstance(body, dict) else None
        if not isinstance(bundle, dict):
            raise TranslationError("Translator returned an unexpected payload")
        return bundle
