from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
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
from .errors import TodoError
from .logging_setup import setup_logging
from .schemas import HealthStatus, TodoRequest
from .service import TodoService
from .validator import parse_todo_id
from .web import cors_options, log_requests, serve_web_file


def create_app(service: Optional[TodoService] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    service = service or TodoService()

    app = FastAPI(title="Todo List API")
    app.state.service = service
    app.add_middleware(CORSMiddleware, **cors_options(settings.cors_origins))
    app.middleware("http")(log_requests)

    @app.exception_handler(TodoError)
    async def handle_todo_error(request: Request, exc: TodoError):
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError):
        return to_response(fail(MSG_INVALID_DATA), 400)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        # body parsing failures surface as a bare 400 from fastapi
        if exc.status_code == 400:
            return to_response(fail(MSG_INVALID_DATA), 400)
        return to_response(fail(str(exc.detail)), exc.status_code, getattr(exc, "headers", None))

    @app.get("/api/v1/todos")
    def list_todos(status_filter: str = Query("all", alias="filter")):
        return to_response(ok(MSG_LISTED, service.list(status_filter)))

    @app.post("/api/v1/todos")
    def create_todo(payload: TodoRequest):
        todo = service.create(payload)
        return to_response(ok(MSG_CREATED, todo), 201)

    @app.get("/api/v1/todos/{todo_id}")
    def get_todo(todo_id: str):
        todo = service.get(parse_todo_id(todo_id))
        return to_response(ok(MSG_FOUND, todo))

    @app.put("/api/v1/todos/{todo_id}")
    def update_todo(todo_id: str, payload: TodoRequest):
        todo = service.update(parse_todo_id(todo_id), payload)
        return to_response(ok(MSG_UPDATED, todo))

    @app.delete("/api/v1/todos/{todo_id}")
    def delete_todo(todo_id: str):
        service.delete(parse_todo_id(todo_id))
        return to_response(ok(MSG_DELETED))

    @app.get("/api/v1/stats")
    def get_stats():
        return to_response(ok(MSG_STATS, service.stats()))

    @app.get("/api/v1/health", response_model=HealthStatus)
    def health():
        return HealthStatus(message="Todo API is running with FastAPI", framework="FastAPI")

    # Anything not matched above: a file from the web dir, or index.html
    @app.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    def web_files(full_path: str):
        return serve_web_file(settings.static_dir, "/" + full_path)

    return app


app = create_app()


def run() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run("todoapi.main:app", host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
