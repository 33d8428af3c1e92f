"""
REST API for the File Streamer

Design Decision: API Framework
==============================

Options Considered:
1. FastAPI - Modern, fast, auto-docs, async support
2. Flask - Simple, widely used, but sync-focused
3. aiohttp - Async, but less features
4. Starlette - Lightweight, FastAPI is built on it

Decision: FastAPI
- Native async support (the transfer loop sleeps between chunks)
- Raw ASGI access through a custom Response for exact header order
- Pydantic integration for the info endpoints

API Design:
- GET /files/{path} streams a file below the configured root
- GET /info/{path} describes it without sending it
- Range requests, throttling, and caching headers come from the streamer
"""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..config import Config
from ..file import ContentTypeProbe, FileDescriptor, is_readable
from ..streamer import FileStreamer
from .response import SendFileResponse

logger = logging.getLogger(__name__)


# === Pydantic Models ===

class FileInfo(BaseModel):
    """Information about a servable file."""
    name: str
    size: int
    mime_type: str
    accept_ranges: str = "bytes"


class ServerStats(BaseModel):
    """Download counters since startup."""
    downloads_started: int
    downloads_completed: int
    uptime_seconds: float


# === Helpers ===

def resolve_under_root(root: Path, file_path: str) -> Path:
    """
    Map a URL path onto the served root.

    Raises:
        HTTPException: 404 if the path escapes the root
    """
    root = root.resolve()
    candidate = (root / file_path).resolve()
    try:
        candidate.relative_to(root)
    except ValueError:
        raise HTTPException(status_code=404, detail="File not found")
    return candidate


def validate_download_name(name: str) -> str:
    """
    Check a client-supplied download name before it goes into a header.

    Raises:
        HTTPException: 400 if the name contains quotes, backslashes,
            or control characters
    """
    if any(c in "\"\\" or ord(c) < 0x20 or ord(c) == 0x7f for c in name):
        raise HTTPException(status_code=400, detail="Invalid download name")
    return name


# === API Creation ===

def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Server configuration (defaults if not provided)

    Returns:
        FastAPI application
    """
    config = config or Config()
    # Fail at startup, not on every download
    policy = config.policy()
    probe = ContentTypeProbe()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown."""
        logger.info(f"Serving files from {config.root_dir.resolve()}")
        yield
        logger.info("API server stopping...")

    app = FastAPI(
        title="HTTP SendFile API",
        description="Range-aware, throttled file downloads",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.stats = {'started': 0, 'completed': 0, 'since': time.time()}

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_methods=["GET"],
            allow_headers=["Range"],
            expose_headers=["Content-Range", "Accept-Ranges", "Content-Length", "Content-Disposition"],
        )

    # === Endpoints ===

    @app.get("/", tags=["General"])
    async def root():
        """API root - basic info."""
        return {
            "name": "HTTP SendFile",
            "version": "1.0.0",
            "chunk_bytes": config.chunk_bytes,
            "delay_seconds": config.delay_seconds,
        }

    @app.get("/stats", response_model=ServerStats, tags=["General"])
    async def get_stats():
        """Download counters."""
        stats = app.state.stats
        return ServerStats(
            downloads_started=stats['started'],
            downloads_completed=stats['completed'],
            uptime_seconds=time.time() - stats['since'],
        )

    @app.get("/files/{file_path:path}", tags=["Files"])
    async def download_file(file_path: str, download: Optional[bool] = None,
                            name: Optional[str] = None):
        """
        Stream a file.

        Honours the Range header. ``download=false`` drops the
        attachment disposition; ``name`` overrides the suggested name.
        """
        path = resolve_under_root(config.root_dir, file_path)
        logger.debug(f"Download request for: {path}")

        streamer = FileStreamer(policy=policy, probe=probe)
        if name:
            streamer.set_disposition_name(validate_download_name(name))

        def on_complete():
            app.state.stats['completed'] += 1
            logger.info(f"Download complete: {path.name}")

        app.state.stats['started'] += 1
        return SendFileResponse(
            path,
            streamer,
            with_disposition=config.with_disposition if download is None else download,
            on_complete=on_complete,
        )

    @app.get("/info/{file_path:path}", response_model=FileInfo, tags=["Files"])
    async def get_file_info(file_path: str):
        """Get information about a file without sending it."""
        path = resolve_under_root(config.root_dir, file_path)
        if not is_readable(path):
            raise HTTPException(status_code=404, detail="File not found")

        descriptor = FileDescriptor.from_path(path)
        return FileInfo(
            name=descriptor.name,
            size=descriptor.size,
            mime_type=config.content_type or probe.probe(path),
        )

    return app


async def run_api_server(config: Config):
    """
    Run the API server.

    Args:
        config: Server configuration (host, port, root_dir, throttle)
    """
    import uvicorn

    app = create_app(config)

    server_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
    server = uvicorn.Server(server_config)
    await server.serve()
