import logging
import os
import subprocess
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import CORS_ORIGINS, LOG_LEVEL
from app.database import engine, init_db
from app.db_schema_patch import ensure_grid_settings_columns, ensure_practice_schedule_columns
from app.routes import grid_layout, hubs, practice_schedules, rotation_blocks, rotation_events

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

APP_NAME = "Club Rotation Grid API"

app = FastAPI(title=APP_NAME)


def get_build_info():
    """Get git commit hash or build timestamp"""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=os.path.dirname(os.path.dirname(__file__)),
            capture_output=True,
            text=True,
            timeout=2,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git unavailable for build hash: %s", e)

    # Fallback to build timestamp
    return datetime.now().strftime("%Y%m%d-%H%M%S")


BUILD_HASH = get_build_info()

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(hubs.router, prefix="/api", tags=["hubs"])
app.include_router(practice_schedules.router, prefix="/api", tags=["practice-schedules"])
app.include_router(rotation_events.router, prefix="/api", tags=["rotation-events"])
app.include_router(rotation_blocks.router, prefix="/api", tags=["rotation-blocks"])

# Column layout + assembled grid view
app.include_router(grid_layout.router, prefix="/api", tags=["rotation-grid"])


@app.on_event("startup")
def on_startup():
    init_db()
    ensure_practice_schedule_columns(engine)
    ensure_grid_settings_columns(engine)

    route_count = 0
    for r in app.routes:
        methods = getattr(r, "methods", None)
        path = getattr(r, "path", None)
        if path:
            methods_str = ", ".join(sorted(methods)) if methods else "N/A"
            logger.debug("%-20s %s", methods_str, path)
            route_count += 1
    logger.info("%s started: %d routes, build %s", APP_NAME, route_count, BUILD_HASH)


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify which code is running"""
    return {"app_name": APP_NAME, "build_hash": BUILD_HASH, "status": "healthy"}


# Serve frontend static build in production.
# The build script places the Vite output in backend/static/
_static_dir = Path(__file__).resolve().parent.parent / "static"
if _static_dir.is_dir():
    from fastapi.responses import FileResponse

    app.mount("/assets", StaticFiles(directory=str(_static_dir / "assets")), name="static-assets")

    @app.get("/{full_path:path}")
    async def serve_spa(full_path: str):
        """Serve the SPA index.html for all non-API routes."""
        file_path = _static_dir / full_path
        if file_path.is_file():
            return FileResponse(str(file_path))
        return FileResponse(str(_static_dir / "index.html"))
else:

    @app.get("/")
    def root():
        return {"message": f"{APP_NAME} (no frontend build found)"}
