from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager
from spectapps.core.config import settings
from spectapps.core.logging import setup_logging
from spectapps.core.exceptions import (
    SpectAppsException, spectapps_exception_handler,
    sqlalchemy_exception_handler, general_exception_handler
)
from spectapps.db.init_db import init_db
from spectapps.services.video_generation.orchestrator import get_generation_orchestrator
from spectapps.api.v1.api import api_router

# Set up logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Startup
    init_db()
    orchestrator = get_generation_orchestrator()
    await orchestrator.client.open()

    yield

    # Shutdown
    orchestrator.close()
    await orchestrator.client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Prompt and photo to short vertical video",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan
)

# Exception handlers
app.add_exception_handler(SpectAppsException, spectapps_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.get("/healthz")
def healthz():
    return {"ok": True}


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
