"""
Server-rendered variant: Jinja2 pages and fragments driven by htmx.

Mutations answer with the refreshed list fragment plus an out-of-band
stats block, so the browser swaps both without a full reload.
"""
import json
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
import uvicorn

from .config import TEMPLATES_DIR, Settings, load_settings
from .envelope import MSG_CREATED, MSG_FOUND, ok, to_response
from .errors import InvalidInput, TodoError
from .logging_setup import setup_logging
from .schemas import HealthStatus, TodoRequest
from .service import TodoService
from .validator import parse_todo_id
from .web import cors_options, log_requests, serve_web_file

logger = logging.getLogger(__name__)

MSG_UNPROCESSABLE = "Could not process the data"


def format_date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y %H:%M")


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["format_date"] = format_date


async def decode_flexible(request: Request) -> TodoRequest:
    """Read a TodoRequest from a JSON body, falling back to form fields."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            data = await request.json()
        else:
            form = await request.form()
            data = {key: form.get(key) for key in form.keys()}
        return TodoRequest.model_validate(data)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        logger.info("Rejected body on %s %s: %s", request.method, request.url.path, exc)
        raise InvalidInput(f"{MSG_UNPROCESSABLE}: {exc}") from exc


def create_app(service: Optional[TodoService] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    service = service or TodoService()

    app = FastAPI(title="Todo List (Jinja2 + htmx)")
    app.state.service = service
    app.add_middleware(CORSMiddleware, **cors_options(settings.cors_origins, ["HX-Request"]))
    app.middleware("http")(log_requests)

    @app.exception_handler(TodoError)
    async def handle_todo_error(request: Request, exc: TodoError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    def refreshed_list(request: Request):
        return templates.TemplateResponse(
            request,
            "_refresh.html",
            {"todos": service.list("all"), "stats": service.stats()},
        )

    @app.get("/")
    def home(request: Request):
        return templates.TemplateResponse(
            request,
            "layout.html",
            {"title": "Todo List", "todos": service.list("all"), "stats": service.stats()},
        )

    @app.get("/api/todos")
    def list_todos(request: Request, status_filter: str = Query("all", alias="filter")):
        return templates.TemplateResponse(
            request, "_todo_list.html", {"todos": service.list(status_filter)}
        )

    @app.post("/api/todos")
    async def create_todo(request: Request):
        service.create(await decode_flexible(request))
        return refreshed_list(request)

    @app.post("/api/todos/flexible")
    async def create_todo_flexible(request: Request):
        try:
            todo = service.create(await decode_flexible(request))
        except InvalidInput as exc:
            return JSONResponse({"error": exc.message}, status_code=400)
        return to_response(ok(MSG_CREATED, todo), 201)

    @app.get("/api/todos/{todo_id}")
    def get_todo(todo_id: str):
        return to_response(ok(MSG_FOUND, service.get(parse_todo_id(todo_id))))

    @app.put("/api/todos/{todo_id}")
    async def update_todo(request: Request, todo_id: str):
        ident = parse_todo_id(todo_id)
        service.update(ident, await decode_flexible(request))
        return refreshed_list(request)

    @app.delete("/api/todos/{todo_id}")
    def delete_todo(request: Request, todo_id: str):
        service.delete(parse_todo_id(todo_id))
        return refreshed_list(request)

    @app.get("/api/todos/{todo_id}/edit")
    def edit_modal(request: Request, todo_id: str):
        todo = service.get(parse_todo_id(todo_id))
        return templates.TemplateResponse(request, "_edit_modal.html", {"todo": todo})

    @app.get("/api/close-modal")
    def close_modal():
        return PlainTextResponse("")

    @app.get("/api/health", response_model=HealthStatus)
    def health():
        return HealthStatus(
            message="Todo API is running with Jinja2 + htmx",
            framework="FastAPI + Jinja2 + htmx",
            formats=["JSON", "Form Data"],
        )

    @app.get("/static/{path:path}", include_in_schema=False)
    def static_files(path: str):
        return serve_web_file(settings.static_dir, "/" + path, fallback=False)

    return app


app = create_app()


def run() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run("todoapi.htmx:app", host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
