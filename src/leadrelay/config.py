"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_STATIC_DIR = str(Path(__file__).resolve().parent / "static")


class Settings(BaseSettings):
    # Airtable
    airtable_base_id: str = ""
    airtable_api_token: str = ""
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_timeout_seconds: float | None = 20.0
    airtable_leads_table: str = "Leads"
    airtable_connections_table: str = "Connecters"
    airtable_users_table: str = "Users"

    # Nango
    nango_secret_key: str = ""
    nango_api_url: str = "https://api.nango.dev"
    nango_timeout_seconds: float | None = None

    # Sync events are only ingested for this model; empty accepts any model
    sync_model: str = "Contact"

    # Downstream automation webhook (n8n)
    forward_webhook_url: str = "http://n8n.leadchaser.ai/webhook/287088cf-fd50-486e-b4f6-a2c299cf734b"
    forward_timeout_seconds: float | None = None

    # CORS
    cors_allowed_origins: list[str] = ["*"]

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    json_logs: bool = True

    # Bundled test UI
    static_dir: str = DEFAULT_STATIC_DIR

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
