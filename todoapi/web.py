"""Pieces shared by every front end: static files, request log line, CORS."""

import logging
import time
from pathlib import Path
from typing import Dict, List

from starlette.requests import Request
from starlette.responses import FileResponse, PlainTextResponse, Response

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
}
DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Origin", "Content-Type", "Authorization"]


def content_type(path: Path) -> str:
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def not_found() -> Response:
    return PlainTextResponse("404 page not found", status_code=404)


def serve_web_file(static_dir: Path, url_path: str, fallback: bool = True) -> Response:
    """
    Serve ``url_path`` from ``static_dir``.

    API paths never fall through to files. Directory paths map to
    index.html, and so does anything missing or outside ``static_dir``,
    so client-side routes of the single page app still load. With
    ``fallback=False`` a missing file is a plain 404 instead.
    """
    if url_path.startswith("/api/"):
        return not_found()

    if url_path == "/" or url_path.endswith("/"):
        url_path = "/index.html"

    root = Path(static_dir).resolve()
    candidate = (root / url_path.lstrip("/")).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        if not fallback:
            return not_found()
        candidate = root / "index.html"
    if not candidate.is_file():
        return not_found()

    return FileResponse(candidate, media_type=content_type(candidate))


def cors_options(origins: List[str], extra_headers: List[str] = ()) -> Dict:
    """Keyword arguments for starlette's CORSMiddleware."""
    return {
        "allow_origins": list(origins),
        "allow_methods": list(CORS_METHODS),
        "allow_headers": CORS_HEADERS + list(extra_headers),
        "expose_headers": ["Content-Length"],
        # browsers reject credentials with a wildcard origin
        "allow_credentials": "*" not in origins,
    }


async def log_requests(request: Request, call_next) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - started) * 1000
    client = request.client.host if request.client else "-"
    logger.info(
        "%s %s %s %d %.2fms %s",
        client,
        request.method,
        request.url.path,
        response.status_code,
        latency_ms,
        request.headers.get("user-agent", ""),
    )
    return response
