from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from podhost.api.v1.router import api_router, feed_router
from podhost.core.config import Settings, get_settings
from podhost.core.errors import PodhostError
from podhost.core.logging import configure_logging
from podhost.core.security import parse_credential
from podhost.db.session import create_catalog_engine, create_session_factory
from podhost.schemas import HealthResponse
from podhost.services.content_tree import ContentTree

logger = structlog.get_logger()

ROBOTS_TXT = "User-agent: *\nDisallow: /"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    settings: Settings = app.state.settings
    logger.info(
        "Starting podhost",
        host=settings.host,
        root=settings.root,
        auth=bool(app.state.credentials),
    )

    yield

    logger.info("Shutting down podhost")
    app.state.engine.dispose()


async def podhost_error_handler(request: Request, exc: PodhostError):
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.message,
            cause=str(exc.cause) if exc.cause else None,
        )
    else:
        logger.info("Request rejected", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application from an explicit configuration"""
    settings = settings or get_settings()
    configure_logging(settings.debug)

    tree = ContentTree(settings.content_root)
    tree.ensure_root()
    engine = create_catalog_engine(settings.catalog_url)

    app = FastAPI(
        title=settings.app_name,
        description="Self-hosted podcast publishing backend",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.content_tree = tree
    app.state.credentials = parse_credential(settings.credential)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
        expose_headers=["Authorization"],
        max_age=300,
    )

    app.add_exception_handler(PodhostError, podhost_error_handler)

    base = settings.base_path
    app.include_router(api_router, prefix=f"{base}/api")
    app.include_router(feed_router, prefix=f"{base}/feed")

    @app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
    async def robots():
        return ROBOTS_TXT

    @app.get(f"{base}/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        health = {"status": "healthy", "database": "unknown", "content": "unknown"}

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            health["database"] = "connected"
        except Exception as e:
            health["database"] = "error"
            health["detail"] = str(e)
            health["status"] = "degraded"

        if tree.is_available():
            health["content"] = "writable"
        else:
            health["content"] = "unavailable"
            health["status"] = "degraded"

        return health

    # Static content: episode files and covers
    app.mount(
        f"{base}/files",
        StaticFiles(directory=settings.content_root, check_dir=False),
        name="files",
    )

    # Admin UI, mounted last so it does not shadow the routes above
    if settings.frontend_dir and Path(settings.frontend_dir).is_dir():
        app.mount(base or "/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "podhost.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
