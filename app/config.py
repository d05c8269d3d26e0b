from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # ── Server ──────────────────────────────────────────────────────────
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"

    # ── Realtime counter ────────────────────────────────────────────────
    socket_path: str = "/api/socket"
    # Upper bound for a single session's delivery during a broadcast.
    send_timeout_seconds: float = 2.0

    # ── Default response headers ────────────────────────────────────────
    server_header: str = "shared-counter"
    allowed_origin: str = "localhost"
    content_security_policy: str = "default-src;"

    # ── Static frontend ─────────────────────────────────────────────────
    static_dir: str = "static"


@lru_cache
def get_settings() -> Settings:
    return Settings()
