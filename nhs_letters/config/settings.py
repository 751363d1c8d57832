from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "nhs_letters"
    db_username: str = "nhs_letters"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: float = 10.0

    storage_disk: str = "local"
    storage_container: str = "nhs-letters"
    files_root: str = "/app/files"

    pdf_engine: str = "pdfplumber"
    max_upload_bytes: int | None = None

    max_event_attempts: int = 3
    event_poll_interval_seconds: int = 5
    event_batch_size: int = 10
    event_lock_timeout_seconds: int = 600
    enrichment_lookup_months: int = 2

    summarization_provider: str = "openai"
    summarization_temperature: float = 0.3
    summarization_max_tokens: int = 300

    summarization_openai_api_key: str = ""
    summarization_openai_model_name: str = "gpt-4o-mini"
    summarization_openai_timeout_seconds: int = 30

    summarization_openai_compatible_base_url: str = ""
    summarization_openai_compatible_api_key: str = ""
    summarization_openai_compatible_model_name: str = ""
    summarization_openai_compatible_timeout_seconds: int = 30

    summarization_openrouter_api_key: str = ""
    summarization_openrouter_model_name: str = "openai/gpt-4o-mini"
    summarization_groq_api_key: str = ""
    summarization_groq_model_name: str = ""
    summarization_ollama_api_key: str = "ollama"
    summarization_ollama_model_name: str = ""

    api_host: str = "0.0.0.0"
    api_port: int = 8000
