import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidshare.api.v1.router import api_router
from vidshare.config import settings
from vidshare.core.exceptions import ApiError
from vidshare.core.middleware import RequestContextMiddleware
from vidshare.core.response import error
from vidshare.core.validation import format_validation_errors

logger = logging.getLogger("vidshare.errors")


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _cors_origins() -> list[str]:
    raw = settings.CORS_ORIGINS or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


def create_app() -> FastAPI:
    _configure_logging()
    app = FastAPI(title="VidShare API", version="0.1.0")
    app.include_router(api_router)
    app.add_middleware(RequestContextMiddleware)
    origins = _cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = format_validation_errors(exc.errors())
        return error(400, messages[0] if messages else "Invalid request", messages)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error(500, "Internal Server Error")

    return app


app = create_app()
