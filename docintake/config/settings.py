from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_MEDIA_TYPES = [
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docintake"
    db_username: str = "docintake"
    db_password: str = "secret"

    record_store: str = "postgres"
    storage_backend: str = "local"
    storage_root: str = "/app/uploads"

    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_media_types: list[str] = DEFAULT_ALLOWED_MEDIA_TYPES

    pdf_engine: str = "pdfplumber"
    ocr_language: str = "eng"
    extraction_timeout_seconds: float = 60.0

    analysis_provider: str = "openai"
    analysis_excerpt_chars: int = 4000
    analysis_max_tokens: int = 1000
    analysis_timeout_seconds: int = 30
    analysis_temperature: float = 0.0

    analysis_openai_api_key: str = ""
    analysis_openai_model_name: str = "gpt-4o"

    analysis_openai_compatible_base_url: str = ""
    analysis_openai_compatible_api_key: str = ""
    analysis_openai_compatible_model_name: str = ""

    analysis_openrouter_api_key: str = ""
    analysis_openrouter_model_name: str = ""
    analysis_groq_api_key: str = ""
    analysis_groq_model_name: str = ""
    analysis_together_api_key: str = ""
    analysis_together_model_name: str = ""
    analysis_deepseek_api_key: str = ""
    analysis_deepseek_model_name: str = ""
    analysis_ollama_api_key: str = ""
    analysis_ollama_model_name: str = ""

    api_host: str = "0.0.0.0"
    api_port: int = 8000
