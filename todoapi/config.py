"""Settings loaded from environment variables (+ optional .env)."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(".env", override=False)

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_STATIC_DIR = PACKAGE_DIR / "static"
TEMPLATES_DIR = PACKAGE_DIR / "templates"


def _port(default: int = 8080) -> int:
    try:
        return int(os.getenv("PORT", ""))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "info"
    static_dir: Path = DEFAULT_STATIC_DIR
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def load_settings() -> Settings:
    return Settings(
        host=os.getenv("TODO_HOST", "127.0.0.1"),
        port=_port(),
        log_level=os.getenv("TODO_LOG_LEVEL", "info").strip().lower() or "info",
        static_dir=Path(os.getenv("TODO_STATIC_DIR") or DEFAULT_STATIC_DIR).expanduser(),
        cors_origins=os.getenv("TODO_CORS_ORIGINS", "*").replace(",", " ").split() or ["*"],
    )
