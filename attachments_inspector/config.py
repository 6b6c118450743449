from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from attachments_inspector import PLUGIN_VERSION

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "PRC Attachments Inspector"
    app_version: str = PLUGIN_VERSION
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./attachments_inspector.db"

    # Site settings
    site_url: str = "http://localhost:8000"
    plugin_url: str = "http://localhost:8000/plugins/prc-attachments-inspector"
    uploads_url: str = "http://localhost:8000/uploads"
    api_namespace: str = "/prc-api/v3"

    # Lifecycle notifications
    technical_contact: str = "webdev@pewresearch.org"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_from: str = "noreply@pewresearch.org"
    smtp_timeout: float = 10.0

    # Attachment queries
    report_children_limit: int = 25
    panel_limit: int = 50
    panel_caption_source: Literal["content", "excerpt"] = "content"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Plugin settings
    plugins_config_file: str = "data/plugins_config.json"

    # CORS settings
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
