"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hearth import models  # noqa: F401  registers mappers for create_all
from hearth.api.errors import register_exception_handlers
from hearth.api.routes import api_router
from hearth.core.config import settings
from hearth.core.database import Base, engine
from hearth.core.logging import REQUEST_ID_HEADER, RequestIdMiddleware, configure_logging
from hearth.services.notifications import build_notifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    configure_logging(settings)
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    app.state.notifier = build_notifier(settings)
    logger.info("Hearth started", extra={"version": settings.VERSION})
    yield
    logger.info("Hearth stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Hearth real-estate marketplace API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)
app.add_middleware(RequestIdMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(api_router, prefix="/api")


@app.get("/")
def root() -> dict[str, str]:
    """API landing."""
    return {"message": f"Welcome to {settings.PROJECT_NAME}", "version": settings.VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hearth.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
