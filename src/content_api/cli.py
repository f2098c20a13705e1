# cli.py
import asyncio
import logging

import click

from content_api.config.settings import get_settings
from content_api.errors import ContentApiError
from content_api.logging_config import configure_logging
from content_api.services.translation_gate import TranslationGate
from content_api.services.translator import HttpTranslator
from content_api.storage.location import is_persistent, services_file_path
from content_api.storage.records import ServiceRecordStore

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the content API"""
    configure_logging(get_settings().log_level)


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  Persistent disk: {settings.persistent_disk_path}")
    print(f"  Local storage dir: {settings.local_storage_dir}")
    print(f"  Uploads dir: {settings.uploads_dir}")
    print(f"  S3 bucket: {settings.s3_bucket_name}")
    print(f"  S3 endpoint: {settings.s3_endpoint_url}")
    print(f"  S3 credential configured: {bool(settings.s3_access_key_id and settings.s3_secret_access_key)}")
    print(f"  Translator URL: {settings.translator_url}")
    print(f"  Source language: {settings.source_language}")


@cli.command()
def where():
    """Show where service data is read from right now"""
    settings = get_settings()
    store = ServiceRecordStore(settings)
    result = store.read_with_outcome(seed_write=False)

    print(f"Data file: {services_file_path(settings)} ({'persistent disk' if is_persistent(settings) else 'local fallback'})")
    print(f"Read outcome: {result.outcome.value} ({len(result.services)} service(s))")
    if result.error:
        print(f"Primary read error: {result.error}")


@cli.command()
@click.option("--force", is_flag=True, help="Re-translate services that are already complete")
@click.option("--id", "service_id", default=None, help="Only translate this service")
def translate(force, service_id):
    """Translate services that are missing languages"""
    settings = get_settings()
    gate = TranslationGate(
        store=ServiceRecordStore(settings),
        translator=HttpTranslator.from_settings(settings),
        timeout=settings.translation_timeout_seconds,
    )
    try:
        report = asyncio.run(gate.translate_missing(service_id=service_id, force=force))
    except ContentApiError as e:
        raise click.ClickException(f"{e.message}: {e.details}" if e.details else e.message)

    print(report.message)
    for outcome in report.services:
        mark = "✅" if outcome.success else "❌"
        detail = f" ({outcome.error})" if outcome.error else ""
        print(f"  {mark} {outcome.id}: {outcome.translations_count} language(s){detail}")


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", default=8000, type=int, help="Port to listen on")
def serve(host, port):
    """Run the API with uvicorn"""
    import uvicorn

    from content_api.main import create_app

    uvicorn.run(create_app(get_settings()), host=host, port=port)


if __name__ == "__main__":
    cli()
