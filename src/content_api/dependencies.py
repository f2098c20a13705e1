"""Per-request collaborators built from the settings stored on the app."""
from fastapi import Request

from content_api.config.settings import Settings
from content_api.services.media_store import MediaStore
from content_api.services.translation_gate import TranslationGate
from content_api.services.translator import HttpTranslator, Translator
from content_api.storage.records import ServiceRecordStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_record_store(request: Request) -> ServiceRecordStore:
    return ServiceRecordStore(get_app_settings(request))


def get_translator(request: Request) -> Translator:
    # A translator set on app.state (tests, scripts) takes precedence over HTTP.
    translator = getattr(request.app.state, "translator", None)
    return translator or HttpTranslator.from_settings(get_app_settings(request))


def get_translation_gate(request: Request) -> TranslationGate:
    settings = get_app_settings(request)
    return TranslationGate(
        store=get_record_store(request),
        translator=get_translator(request),
        timeout=settings.translation_timeout_seconds,
    )


def get_media_store(request: Request) -> MediaStore:
    return MediaStore(get_app_settings(request))
