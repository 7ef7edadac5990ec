"""
Bundle Explorer — FastAPI Backend
Normalizes bundler stats and serves the module graph and size hierarchy
to the visualization frontend.
"""
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from config import CORS_ORIGINS, LOG_LEVEL
from routers import hierarchy, modules, stats

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Bundle Explorer API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(stats.router)
app.include_router(modules.router)
app.include_router(hierarchy.router)


@app.get("/api/health")
def health():
    return {"status": "ok"}


# ── Serve frontend build (must be last) ─────────────────────────────────────

FRONTEND_DIST = Path(__file__).parent.parent / "frontend" / "dist"

if FRONTEND_DIST.exists():
    app.mount("/assets", StaticFiles(directory=FRONTEND_DIST / "assets"), name="assets")

    @app.get("/{full_path:path}")
    async def serve_spa(full_path: str):
        """Serve the SPA — return index.html for all non-API routes."""
        return FileResponse(FRONTEND_DIST / "index.html")
