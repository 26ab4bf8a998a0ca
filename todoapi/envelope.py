import logging
from typing import Any, Dict, Optional

from starlette.responses import JSONResponse

from .errors import TodoError
from .schemas import Envelope

MSG_LISTED = "Todos retrieved successfully"
MSG_FOUND = "Todo found"
MSG_CREATED = "Todo created successfully"
MSG_UPDATED = "Todo updated successfully"
MSG_DELETED = "Todo deleted successfully"
MSG_STATS = "Stats retrieved successfully"
MSG_INVALID_DATA = "Invalid data"

logger = logging.getLogger(__name__)


def ok(message: str, data: Any = None) -> Envelope:
    return Envelope(success=True, message=message, data=data)


def fail(message: str) -> Envelope:
    return Envelope(success=False, message=message)


def to_response(envelope: Envelope, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    # data is left out entirely when there is no payload
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=envelope.model_dump(mode="json", exclude_none=True),
    )


def error_response(exc: TodoError, status_code: Optional[int] = None) -> JSONResponse:
    logger.info("Rejected: %s (%s)", exc.message, type(exc).__name__)
    return to_response(fail(exc.message), status_code or exc.status_code)
