"""
The same JSON API on a bare starlette router.

No dependency injection or body models here: every handler pulls the id
from the path, decodes the body itself and maps errors to envelopes.
"""
import json
import logging
from typing import Optional

from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route, Router
import uvicorn

from .config import Settings, load_settings
from .envelope import (
    MSG_CREATED,
    MSG_DELETED,
    MSG_FOUND,
    MSG_INVALID_DATA,
    MSG_LISTED,
    MSG_STATS,
    MSG_UPDATED,
    error_response,
    fail,
    ok,
    to_response,
)
from .errors import InvalidInput, TodoError
from .logging_setup import setup_logging
from .schemas import HealthStatus, TodoRequest
from .service import TodoService
from .validator import parse_todo_id
from .web import cors_options, log_requests, serve_web_file

logger = logging.getLogger(__name__)


async def decode_request(request: Request) -> TodoRequest:
    try:
        body = await request.json()
        return TodoRequest.model_validate(body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        logger.info("Rejected body on %s %s: %s", request.method, request.url.path, exc)
        raise InvalidInput(MSG_INVALID_DATA) from exc


class TodoHandler:
    def __init__(self, service: TodoService):
        self.service = service

    async def list_todos(self, request: Request):
        todos = self.service.list(request.query_params.get("filter", "all"))
        return to_response(ok(MSG_LISTED, todos))

    async def create_todo(self, request: Request):
        try:
            payload = await decode_request(request)
            todo = self.service.create(payload)
        except TodoError as exc:
            return error_response(exc)
        return to_response(ok(MSG_CREATED, todo), 201)

    async def get_todo(self, request: Request):
        try:
            todo = self.service.get(parse_todo_id(request.path_params["id"]))
        except TodoError as exc:
            return error_response(exc)
        return to_response(ok(MSG_FOUND, todo))

    async def update_todo(self, request: Request):
        try:
            todo_id = parse_todo_id(request.path_params["id"])
            payload = await decode_request(request)
            todo = self.service.update(todo_id, payload)
        except TodoError as exc:
            return error_response(exc)
        return to_response(ok(MSG_UPDATED, todo))

    async def delete_todo(self, request: Request):
        try:
            self.service.delete(parse_todo_id(request.path_params["id"]))
        except TodoError as exc:
            return error_response(exc)
        return to_response(ok(MSG_DELETED))

    async def stats(self, request: Request):
        return to_response(ok(MSG_STATS, self.service.stats()))


async def health(request: Request):
    status = HealthStatus(message="Todo API is running", framework="Starlette")
    return JSONResponse(status.model_dump())


def create_app(service: Optional[TodoService] = None, settings: Optional[Settings] = None) -> Starlette:
    settings = settings or load_settings()
    handler = TodoHandler(service or TodoService())

    async def web_files(request: Request):
        return serve_web_file(settings.static_dir, request.url.path)

    api = Router(
        routes=[
            Route("/todos", handler.list_todos, methods=["GET"]),
            Route("/todos", handler.create_todo, methods=["POST"]),
            Route("/todos/{id}", handler.get_todo, methods=["GET"]),
            Route("/todos/{id}", handler.update_todo, methods=["PUT"]),
            Route("/todos/{id}", handler.delete_todo, methods=["DELETE"]),
            Route("/stats", handler.stats, methods=["GET"]),
            Route("/health", health, methods=["GET"]),
        ]
    )

    app = Starlette(
        routes=[
            Mount("/api/v1", app=api),
            Route("/{path:path}", web_files, methods=["GET", "HEAD"]),
        ],
        middleware=[
            Middleware(BaseHTTPMiddleware, dispatch=log_requests),
            Middleware(CORSMiddleware, **cors_options(settings.cors_origins)),
        ],
    )
    app.state.service = handler.service
    return app


app = create_app()


def run() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run("todoapi.mux:app", host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
