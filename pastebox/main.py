"""
Pastebox - Main FastAPI application.
"""
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from pastebox.cache import RenderCache
from pastebox.config import Settings, settings as default_settings
from pastebox.database import PasteDatabase
from pastebox.errors import PasteError
from pastebox.routes import api, health, web

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Translate paste errors into JSON for /api and HTML pages elsewhere."""

    @app.exception_handler(PasteError)
    async def paste_error_handler(request: Request, exc: PasteError):
        if exc.http_status >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.code} on {request.url.path}: {exc.message}")

        if request.url.path.startswith("/api/"):
            return JSONResponse(status_code=exc.http_status, content=exc.to_response())
        return HTMLResponse(
            status_code=exc.http_status,
            content=web.render_error(request.app.state.settings.TITLE, exc.message),
        )


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[PasteDatabase] = None,
) -> FastAPI:
    """
    Build the application with its storage layer and rendering cache.

    Args:
        settings: Settings to use (defaults to the environment)
        db: Ready-made storage layer (defaults to one built from REDIS_URL)
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.TITLE,
        description="A paste service with expiring and burn-after-reading pastes",
        version="1.0.0",
        debug=settings.DEBUG,
    )

    app.state.settings = settings
    app.state.db = db or PasteDatabase(redis_url=settings.REDIS_URL)
    app.state.cache = RenderCache(app.state.db, max_size=settings.RENDER_CACHE_SIZE)

    if app.state.db.using_fallback:
        logger.warning("⚠️  DATABASE: Using IN-MEMORY storage (Redis not available)")
        logger.warning("   Data will NOT persist across server restarts!")
    else:
        logger.info("✅ DATABASE: Connected to Redis")

    register_error_handlers(app)

    # Include route modules; the web router ends with a catch-all path.
    app.include_router(health.router)
    app.include_router(api.router)
    app.include_router(web.router)

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pastebox.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
    )
