"""
Plum Health Profiler – FastAPI Application
===========================================
REST API for the four-stage health profiling pipeline.

Endpoints:
  GET  /                    – Liveness banner
  GET  /health              – Health check with configured backend
  POST /api/health-profile  – Image or free text → risk assessment
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from dotenv import load_dotenv
load_dotenv(override=True)

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import UploadFile

from api.schemas import (
    ErrorResponse,
    HealthProfileResponse,
    HealthResponse,
)
from core.errors import ClientInputError
from core.logging_utils import setup_logging
from core.router import HealthProfileRouter

# ── Setup ───────────────────────────────────────────────────────────────────

setup_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_format=os.environ.get("LOG_FORMAT", "text").lower() == "json",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="Plum Health Profiler",
    description=(
        "Turns free-form health text or a photo of a health form into an "
        "advisory lifestyle risk assessment. Not a diagnostic tool."
    ),
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = HealthProfileRouter()


# ── Endpoints ───────────────────────────────────────────────────────────────


@app.get("/", response_class=PlainTextResponse)
def index():
    return "Plum Health Profiler is Running!"


@app.get("/health", response_model=HealthResponse)
def health():
    """Health check."""
    cfg = router.generation_config
    return HealthResponse(
        status="ok",
        version=VERSION,
        models={"backend": cfg["backend"], "generation": cfg["model"]},
    )


@app.post(
    "/api/health-profile",
    responses={
        200: {"model": HealthProfileResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def health_profile(request: Request):
    """
    Run the profiling pipeline on an uploaded image or inline text.

    Multipart/form fields: ``image`` (file, optional) and ``text`` (optional).
    An empty ``text`` field is still an input; only a missing one is rejected.
    """
    try:
        form = await request.form()
        image = form.get("image")
        if isinstance(image, UploadFile):
            image_bytes = await image.read()
            result = await run_in_threadpool(
                router.profile,
                image=image_bytes,
                filename=image.filename or "upload.png",
            )
        else:
            result = await run_in_threadpool(router.profile, text=form.get("text"))
        return JSONResponse(status_code=200, content=result)
    except ClientInputError as e:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(message=str(e)).model_dump(mode="json"),
        )
    except Exception:
        logger.exception("Health profile endpoint failed")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message="Internal server error.").model_dump(mode="json"),
        )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 3000)))
