from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class TodoRequest(BaseModel):
    title: Optional[str] = ""  # null is rejected by validate_title, not by decoding
    description: str = ""
    completed: bool = False  # lax bool: form checkboxes send "on"


class Todo(BaseModel):
    id: int
    title: str
    description: str = ""
    completed: bool = False
    created_at: datetime
    updated_at: datetime


class TodoStats(BaseModel):
    total: int = 0
    pending: int = 0
    completed: int = 0


class Envelope(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None


class HealthStatus(BaseModel):
    status: str = "ok"
    message: str
    framework: str
    formats: List[str] = Field(default_factory=list)
