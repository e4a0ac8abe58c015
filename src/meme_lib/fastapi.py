import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable

from dishka import AsyncContainer
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

__all__ = ["setup_app", "dishka_lifespan", "error_response", "StartupHook"]

logger = logging.getLogger(__name__)

StartupHook = Callable[[AsyncContainer], Awaitable[None]]


def configure_uvicorn_logging():
    """Configure uvicorn loggers to propagate to root logger."""

    uvicorn_loggers = ["uvicorn", "uvicorn.error", "uvicorn.access"]

    for logger_name in uvicorn_loggers:
        uvicorn_logger = logging.getLogger(logger_name)

        for handler in uvicorn_logger.handlers[:]:
            uvicorn_logger.removeHandler(handler)

        uvicorn_logger.propagate = True


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def internal_exception_handler(request: Request, exc: Exception):
    span = trace.get_current_span()
    span.record_exception(exc)
    span.set_status(trace.Status(trace.StatusCode.ERROR, str(exc)))

    logger.error(
        "Unhandled error while serving %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    return error_response(500, "Internal server error")


def dishka_lifespan(
    *startup: StartupHook,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build a lifespan that runs ``startup`` hooks against the app container
    before serving and closes the container on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        container: AsyncContainer = app.state.dishka_container
        try:
            for hook in startup:
                await hook(container)
            yield
        finally:
            await container.close()

    return lifespan


def setup_app(app: FastAPI):
    configure_uvicorn_logging()

    app.add_exception_handler(Exception, internal_exception_handler)

    FastAPIInstrumentor.instrument_app(app)
