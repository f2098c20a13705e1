from textwrap import dedent
import logging

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from content_api.config.settings import Settings
from content_api.errors import (
    ContentApiError,
    handle_broad_exceptions,
    handle_content_api_errors,
    handle_pydantic_validation_errors,
)
from content_api.logging_config import configure_logging
from content_api.routers.health import router as health_router
from content_api.routers.services import router as services_router
from content_api.routers.upload import router as upload_router
from content_api.services.translator import Translator

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, translator: Translator | None = None) -> FastAPI:
    """Create a FastAPI application.

    :param settings: Settings to use instead of the environment.
    :param translator: Translator to use instead of the HTTP translator.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Content API",
        summary="Store service pages and media, and keep their translations complete",
        version="v1",
        description=dedent(
            """\
        Service page records live in a single JSON document on the mounted disk when
        one is present, and in the working tree otherwise. Media uploads go to an
        S3-compatible bucket when a storage credential is configured.
        """
        ),
        docs_url="/",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.translator = translator

    app.include_router(services_router, tags=["services"])
    app.include_router(upload_router, tags=["upload"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(ContentApiError, handle_content_api_errors)
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(RequestValidationError, handle_pydantic_validation_errors)
    app.middleware("http")(handle_broad_exceptions)

    logger.info(f"{settings.app_name} created")
    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
