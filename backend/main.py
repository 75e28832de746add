"""Slipway Map — FastAPI backend."""
import logging
import os
import subprocess
import sys

from fastapi import FastAPI

# Show sign requests, load fallbacks and save failures (INFO level)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("slipway_core").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from api.slipways import router as slipways_router
from api.uploads import router as uploads_router
from schemas.health import HealthResponse
from utils.config import CORS_ORIGINS, STORE_BACKEND

app = FastAPI(
    title="Slipway Map",
    description="Boat-launch directory: map markers, slipway records and photo upload signing",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-amz-acl", "X-User-Id", "X-User-Name", "X-User-Email"],
)

# API routes under /api (no static mount at / so /api is never shadowed)
app.include_router(router, prefix="/api")
app.include_router(slipways_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")


@app.get("/api/health", response_model=HealthResponse)
def api_health() -> HealthResponse:
    """Explicit health route so /api/health is always available."""
    return HealthResponse()


@app.on_event("startup")
def startup() -> None:
    """Run DB migrations for the local document store."""
    if STORE_BACKEND != "sql":
        return
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")


@app.get("/")
def root() -> dict:
    """Root redirect/info."""
    return {"service": "slipway-map", "docs": "/docs", "health": "/api/health"}
