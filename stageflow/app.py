from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette import status

from stageflow.config import config, environment
from stageflow.database import database
from stageflow.routes import matches, stages
from stageflow.utils.alembic import alembic_run_migrations
from stageflow.utils.errors import CyclicSourceError, EntityNotFound
from stageflow.utils.logging import logger


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    if config.auto_run_migrations:
        alembic_run_migrations()

    await database.connect()
    logger.info("Connected to database, environment %s", environment.value)
    yield
    await database.disconnect()


app = FastAPI(
    title="Stageflow",
    description="Progression engine for multi-stage tournaments",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin for origin in config.cors_origins.split(",") if origin != ""],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EntityNotFound)
async def entity_not_found_handler(_: Request, exc: EntityNotFound) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(CyclicSourceError)
async def cyclic_source_handler(_: Request, exc: CyclicSourceError) -> JSONResponse:
    return JSONResponse(
        {"detail": str(exc), "cycle": exc.cycle}, status_code=status.HTTP_400_BAD_REQUEST
    )


app.include_router(matches.router, tags=["matches"])
app.include_router(stages.router, tags=["stages"])
