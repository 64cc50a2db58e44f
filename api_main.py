import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from habitkit import __version__
from habitkit.api import router
from habitkit.config import settings
from habitkit.db import engine
from habitkit.errors import DuplicateIdError, HabitValidationError, StorageWriteError
from habitkit.logger import setup_logging
from habitkit.models import Base

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)
logger = logging.getLogger("habitkit.api")

app = FastAPI(title="Habitkit API", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.exception_handler(HabitValidationError)
async def on_validation_error(request: Request, exc: HabitValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(DuplicateIdError)
async def on_duplicate_id(request: Request, exc: DuplicateIdError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StorageWriteError)
async def on_storage_write_error(request: Request, exc: StorageWriteError) -> JSONResponse:
    logger.error("Write failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Saving failed, reload and retry", "retry": True})


@app.get("/health/live")
def health_live() -> dict[str, str]:
    return {"status": "alive"}


@app.get("/health/ready")
def health_ready() -> dict[str, str]:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ready"}


@app.on_event("startup")
def on_startup() -> None:
    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)
    logger.info("Habitkit API started (storage=%s, key=%s)", settings.STORAGE_BACKEND, settings.STORAGE_KEY)
