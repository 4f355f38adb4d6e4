from __future__ import annotations  # FastAPI server exposing the mock interview API

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from api.admin import router as admin_router
from api.mocks import router as mocks_router
from api.routes import router as interview_router
from config.settings import settings
from storage.migrate import migrate


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    migrate(settings.DB_PATH)
    logger.info("Database ready at %s", settings.DB_PATH)
    yield


app = FastAPI(title="Mock Interview API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-User-Id"],
)
app.include_router(interview_router)
app.include_router(admin_router)
app.include_router(mocks_router)
app.mount("/media", StaticFiles(directory=settings.MEDIA_DIR, check_dir=False), name="media")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # Malformed payloads are client errors
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Request validation failed")
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    detail = f"Invalid {location}: {message}" if location else message
    return JSONResponse(status_code=400, content={"detail": detail})


@app.get("/")
def health() -> dict[str, str]:  # Liveness probe
    return {"message": "Mock Interview API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api_server:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
