import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from core import db
from core.errors import AppError
from core.log import configure_logging
from vegetables import router as vegetables_router

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)

INTERNAL_ERROR_DETAIL = "Internal server error."

logger = logging.getLogger("api")


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process. A missing DATABASE_URL or an
    # unreachable server aborts startup.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


async def handle_app_error(_: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        # Driver messages stay in the log, never in the response.
        logger.error("request_failed error=%s", exc, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": INTERNAL_ERROR_DETAIL})
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


async def handle_request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def log_requests(request: Request, call_next):
    start_time = time.perf_counter()

    response = await call_next(request)

    duration = round((time.perf_counter() - start_time) * 1000, 2)
    logger.info(
        "%s %s status=%s duration_ms=%s",
        request.method,
        request.url.path,
        response.status_code,
        duration,
    )
    return response


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Vegetable Store API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.include_router(vegetables_router.router, tags=["vegetables"])

    @app.get("/health-check", response_class=PlainTextResponse)
    def health_check() -> str:
        return "OK"

    return app


app = create_app()
