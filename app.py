"""
Caption Editor Backend - Unified Application Entry Point
Mounts the editor service and serves generated media
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from services.editor import app as editor_module
from shared.models import APIResponse
from shared.utils import config, ensure_directory, setup_logging

logger = setup_logging("caption-editor-backend")

editor_app = editor_module.app
editor_session = editor_module.session

media_root = Path(config.get("media_root", "./media"))
ensure_directory(str(media_root))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Sub-application lifespans do not run when mounted.
    editor_session.start_clock()
    logger.info("Caption editor backend started")
    try:
        yield
    finally:
        await editor_session.stop_clock()
        await editor_session.notifier.reset()


app = FastAPI(
    title="Caption Editor Backend API",
    description="""
    Unified API for the short-form caption editor.

    The editor service is mounted at /api/v1/editor; generated narration and
    uploaded videos are served from /media.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("allowed_origins", ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
async def health_check():
    return APIResponse(message="Caption editor backend is healthy")


app.mount("/api/v1/editor", editor_app)
app.mount(config.get("media_base_url", "/media"), StaticFiles(directory=str(media_root)), name="media")
