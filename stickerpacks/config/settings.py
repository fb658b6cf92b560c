"""Deployment settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Two sources, highest priority first:
#
#   1. Environment variables: e.g. SESSION_SECRET=...
#   2. .env file in the working directory (local development)
#
# Field ``session_secret`` maps to env var ``SESSION_SECRET`` and so on.
#
# Settings hold deployment concerns (ports, paths, secrets).  Product
# policy (upload limits, moderator view, redirects) lives in
# config/config.yaml and is read by ``load_config``.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Sticker pack service settings.

    Environment variables override defaults. Loaded from .env when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Storage ===
    submissions_db_path: str = "data/stickerpacks.db"
    users_db_path: str = "data/users.db"
    # Served at /static; uploaded stickers go to <public_dir>/uploads.
    public_dir: str = "public"

    # === Sessions ===
    # Empty = generate a random secret at startup (sessions reset on restart).
    session_secret: str = ""
    session_ttl_hours: int = 168

    # === HTTP ===
    cors_allowed_origins: list[str] = ["*"]

    # === Policy file ===
    config_path: str = "config/config.yaml"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"
