"""FastAPI application: lifespan, CORS, error mapping and routers."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from canonkeeper.config import get_settings
from canonkeeper.errors import ConflictRetryable, EngineError
from canonkeeper.routers import characters, continuity, series
from canonkeeper.utils.logging_config import get_logger, setup_logging

logger = get_logger("canonkeeper.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Ensure tables exist
    from canonkeeper.database import engine
    from canonkeeper.models import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Canonkeeper started", extra={"event_type": "startup"})
    yield
    await engine.dispose()


settings = get_settings()

app = FastAPI(title=settings.app_name, version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    if isinstance(exc, ConflictRetryable):
        logger.error("%s %s failed after retries: %s", request.method, request.url.path, exc,
                     extra={"event_type": "request_failed"})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "message": "Request body or parameters are invalid",
            "retryable": False,
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(series.router)
app.include_router(characters.router)
app.include_router(continuity.router)
