import logging
import os
import uuid

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from rich.console import Console

from vidrelay.api import analyze, download, health
from vidrelay.api.deps import get_tool
from vidrelay.config.settings import config
from vidrelay.core.errors import MissingParameter, RelayError
from vidrelay.core.logging import log_error, log_warning, setup_logging
from vidrelay.core.state import state
from vidrelay.i18n import i18n
from vidrelay.utils.locale import get_locale

console = Console()

setup_logging()

app = FastAPI(
    title=config.api.title,
    description=config.api.description,
    version=config.api.version,
    docs_url="/docs" if config.api.debug else None,
    redoc_url=None
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request.state.request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    response = await call_next(request)
    response.headers["X-Request-ID"] = request.state.request_id
    return response


def error_response(request: Request, status_code: int, message_key: str) -> JSONResponse:
    locale = get_locale(request.headers.get("accept-language"))
    return JSONResponse(
        status_code=status_code,
        content={"error": i18n.get(message_key, locale=locale)}
    )


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    # Single place where relay failures are logged
    if exc.status_code >= 500:
        log_error(request, f"{type(exc).__name__}: {exc.detail}")
    else:
        log_warning(request, f"{type(exc).__name__}: {exc.detail}")
    return error_response(request, exc.status_code, exc.message_key)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    log_warning(request, f"Rejected request body: {exc.errors()}")
    return error_response(request, MissingParameter.status_code, "error.invalid_request")


# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(analyze.router, tags=["Analyze"])
app.include_router(download.router, tags=["Download"])


@app.on_event("startup")
async def startup_event():
    state.scratch_dir = config.download.scratch_dir
    os.makedirs(state.scratch_dir, exist_ok=True)

    tool = app.dependency_overrides.get(get_tool, get_tool)()
    state.ytdlp_version = await tool.version()
    if state.ytdlp_version == "unknown":
        console.print(f"[yellow]⚠ {config.ytdlp.binary} not found or not runnable[/yellow]")
    else:
        console.print(f"[green]✓ {config.ytdlp.binary} {state.ytdlp_version}[/green]")
    logging.getLogger("vidrelay").info(f"Scratch directory: {state.scratch_dir}")


def run() -> None:
    """Console entry point: serve the relay on HOST:PORT"""
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower()
    )


if __name__ == "__main__":
    run()
