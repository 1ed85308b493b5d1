"""Column Alignment Python Server"""

import asyncio
import logging
import os
from typing import Optional

import uvicorn
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from rich.console import Console
from rich.logging import RichHandler

from models.column_types import (
    AlignColumnsRequest,
    AlignColumnsResponse,
    FindNextResult,
    FindUnevenColumnsRequest,
)
from extractors.column_alignment import align_columns, find_uneven_columns
from utils.endpoint_decorators import handle_alignment_errors

API_VERSION = "1.0.0"
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
DEFAULT_TIMEOUT_SECONDS = 300
MIN_TIMEOUT_SECONDS = 30
MAX_TIMEOUT_SECONDS = 600

logger = logging.getLogger("rich")

app = FastAPI(
    title="Column Alignment API",
    description="Balance uneven two-column page layouts",
    version=API_VERSION
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "message": "Column Alignment API",
        "version": API_VERSION,
        "features": [
            "Column break location",
            "Column bottom measurement",
            "Iterative column height balancing",
            "Find next uneven section",
        ]
    }

@app.get("/health")
async def health_check():
    """Health check with dependency versions"""
    import fastapi
    import pydantic

    return {
        "status": "healthy",
        "version": API_VERSION,
        "dependencies": {
            "fastapi": fastapi.__version__,
            "pydantic": pydantic.VERSION,
        }
    }

@app.post("/align-columns", response_model=AlignColumnsResponse)
@handle_alignment_errors
async def align_document_columns(
    *,
    request: AlignColumnsRequest,
    processing_timeout: Optional[int] = Query(DEFAULT_TIMEOUT_SECONDS, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS, description="Processing timeout in seconds")
):
    """
    Balance every uneven two-column section in a page range.

    **Options:**
    - `max_space_after`: cap on any paragraph's trailing space (default: `40`)

    Each section gets at most 5 layout recompute cycles.

    **Returns:**
    - Per-section outcomes (`balanced`, `skipped`, `failed`) and the document
      with its updated trailing spaces
    """
    logger.info(
        f"Aligning columns (pages {request.start_page} to {request.end_page or 'end'}, "
        f"max_space_after={request.options.max_space_after})"
    )

    report, document = await asyncio.to_thread(
        align_columns,
        request.document,
        request.options,
        start_page=request.start_page,
        end_page=request.end_page,
    )

    logger.info(f"Balanced {report.balanced} section(s), {report.failed} failed")
    return AlignColumnsResponse(report=report, document=document)

@app.post("/find-uneven-columns", response_model=FindNextResult)
@handle_alignment_errors
async def find_next_uneven_columns(
    *,
    request: FindUnevenColumnsRequest,
    processing_timeout: Optional[int] = Query(DEFAULT_TIMEOUT_SECONDS, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS, description="Processing timeout in seconds")
):
    """
    Find the next uneven two-column section after `selection_start`.

    With `wraparound=true` a miss restarts once from the document start.
    """
    result = await asyncio.to_thread(
        find_uneven_columns,
        request.document,
        selection_start=request.selection_start,
        wraparound=request.wraparound,
    )

    if result.found:
        logger.info(f"Uneven columns found on page {result.page_number}")
    else:
        logger.info(result.message)
    return result

def _configure_server_logging():
    """Configure logging with Rich handler and filters for clean output"""
    console = Console(force_terminal=True)

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    class ShutdownFilter(logging.Filter):
        """Filter out shutdown-related log messages"""
        def filter(self, record):
            if record.exc_info and record.exc_info[0] in (KeyboardInterrupt, asyncio.CancelledError):
                return False
            if "CancelledError" in str(record.msg) or "KeyboardInterrupt" in str(record.msg):
                return False
            return True

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=True
    )
    rich_handler.addFilter(ShutdownFilter())

    # Silence everything by default
    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=[rich_handler])

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)

    for module_name in ["main", "rich", "engine", "extractors", "processors", "utils"]:
        logging.getLogger(module_name).setLevel(log_level)

    return console

def _find_free_port(start_port: int = 8000) -> int:
    """Find an available port starting from the given port"""
    import socket

    port = start_port
    max_port = start_port + 100

    while port < max_port:
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind(('localhost', port))
                return port
        except OSError:
            port += 1

    return start_port

server_console = _configure_server_logging()

if __name__ == "__main__":
    free_port = _find_free_port()
    server_console.print(f"[bold green]Starting server on http://localhost:{free_port}[/bold green]")

    try:
        uvicorn.run("main:app", host="0.0.0.0", port=free_port, reload=True, log_config=None)
    except KeyboardInterrupt:
        server_console.print("\n[bold yellow]Server stopped.[/bold yellow]")
