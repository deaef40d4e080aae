"""FastAPI application entry point for the favorites service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from favsync.database import dispose_engine, init_db
from favsync.logging_config import setup_logging
from favsync.routers import favorites


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    await init_db()
    yield
    await dispose_engine()


app = FastAPI(
    title="favsync",
    description="Cloud copy of users' favorite paragraphs",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(favorites.router, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "ok"}
