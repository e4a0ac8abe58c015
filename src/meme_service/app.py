import logging

from dishka import Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI, Request
from meme_lib.fastapi import dishka_lifespan, error_response, setup_app

from .clients import storage_provider
from .config import AppConfig
from .db import create_schema, db_provider
from .errors import InvalidInputError, NotFoundError, UploadError
from .router import health_router, router
from .services import meme_service_provider, upload_service_provider

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "An error occurred while uploading the image"


async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return error_response(400, str(exc))


async def not_found_handler(request: Request, exc: NotFoundError):
    return error_response(404, str(exc))


async def upload_error_handler(request: Request, exc: UploadError):
    logger.error("Upload failed", exc_info=exc)
    return error_response(500, UPLOAD_FAILED_MESSAGE)


def create_app(config: AppConfig, *overrides: Provider) -> FastAPI:
    """Assemble the app; providers in ``overrides`` replace the defaults."""
    dishka_container = make_async_container(
        FastapiProvider(),
        config.dishka_provider(),
        db_provider,
        storage_provider,
        upload_service_provider,
        meme_service_provider,
        *overrides,
    )

    app = FastAPI(lifespan=dishka_lifespan(create_schema), title="MemeService")
    setup_dishka(dishka_container, app)
    setup_app(app)

    app.add_exception_handler(InvalidInputError, invalid_input_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UploadError, upload_error_handler)  # type: ignore[arg-type]

    app.include_router(router, prefix="/api")
    app.include_router(health_router)

    return app
