from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "bookgen"
    db_username: str = "bookgen"
    db_password: str = "secret"

    books_root: str = "/app/books"
    exports_root: str = "/app/exports"
    export_base_url: str = "https://example.com/csv"

    pdf_engine: str = "pdfplumber"

    metadata_provider: str = "openai"
    metadata_sample_pages: int = 3

    metadata_openai_api_key: str = ""
    metadata_openai_model_name: str = "gpt-4o-mini"
    metadata_openai_timeout_seconds: int = 30
    metadata_openai_temperature: float = 0.0

    metadata_openai_compatible_base_url: str = ""
    metadata_openai_compatible_api_key: str = ""
    metadata_openai_compatible_model_name: str = ""
    metadata_openai_compatible_timeout_seconds: int = 30

    progress_poll_interval_seconds: int = 5
    progress_seed: int | None = None
