"""Runtime configuration from environment variables (and .env at repo root or cwd)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

STORAGE_BACKENDS = ("sqlalchemy", "neo4j", "memory")

_REPO_ROOT = Path(__file__).resolve().parent.parent.parent


def load_env_file() -> None:
    """Load .env from repo root or current dir. Existing env vars win."""
    for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
        if path.exists():
            load_dotenv(path)
            break


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    storage_backend: str = "sqlalchemy"
    database_url: str = "sqlite:///./leadbook.db"
    database_echo: bool = False
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    log_level: str = "INFO"
    log_file: str | None = None
    cors_origins: tuple[str, ...] = ("*",)
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend {self.storage_backend!r}; "
                f"expected one of {', '.join(STORAGE_BACKENDS)}."
            )

    @classmethod
    def from_env(cls) -> "Settings":
        load_env_file()
        origins = tuple(
            o.strip() for o in _env("CORS_ORIGINS", "*").split(",") if o.strip()
        )
        return cls(
            storage_backend=_env("LEADBOOK_STORAGE", "sqlalchemy").lower(),
            database_url=_env("DATABASE_URL", "sqlite:///./leadbook.db"),
            database_echo=_env_bool("DATABASE_ECHO", False),
            neo4j_uri=_env("NEO4J_URI", "bolt://localhost:7687"),
            neo4j_user=_env("NEO4J_USER", "neo4j"),
            neo4j_password=_env("NEO4J_PASSWORD", "password"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            log_file=_env("LOG_FILE", "") or None,
            cors_origins=origins or ("*",),
            host=_env("API_HOST", "127.0.0.1"),
            port=int(_env("API_PORT", "8000")),
        )
