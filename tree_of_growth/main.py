"""tree_of_growth - personal task tracker that grows a tree as you get things done."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from tree_of_growth.core.config import settings
from tree_of_growth.core.db_client import close_connection, init_db
from tree_of_growth.core.logging import configure_logfire, instrument_fastapi
from tree_of_growth.interface.api_router import router as api_router
from tree_of_growth.services import data_service


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so startup logs are captured
    configure_logfire()

    await init_db()
    logger.info("Database initialized")

    snapshot = await data_service.load_data()
    logger.info(
        "startup_tree_state",
        extra={
            "task_count": len(snapshot.tasks),
            "level": snapshot.tree_state.level,
            "stage": snapshot.tree_state.current_stage,
            "streak": snapshot.tree_state.streak,
        },
    )
    yield
    await close_connection()


app = FastAPI(
    title="tree_of_growth",
    description="Personal task tracker that grows a tree as you complete tasks",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(api_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)


def run() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run("tree_of_growth.main:app", host=settings.host, port=settings.port)
