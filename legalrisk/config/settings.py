from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "legalrisk"
    db_username: str = "legalrisk"
    db_password: str = "secret"
    db_statement_timeout_ms: int = 30000

    files_root: str = "/app/uploads"
    pdf_engine: str = "pdfplumber"

    worker_pool_size: int = 4
    job_poll_interval_seconds: int = 5
    side_task_timeout_seconds: int = 30
    similar_documents_top_k: int = 3

    analysis_provider: str = "openai"
    analysis_model_name: str = "gpt-4o-mini"
    analysis_temperature: float = 0.3
    analysis_max_tokens: int = 2500
    analysis_timeout_seconds: int = 60
    analysis_max_chars: int = 6000

    openai_api_key: str = ""
    openai_compatible_base_url: str = ""

    embedding_provider: str = "openai"
    embedding_model_name: str = "text-embedding-3-small"
    embedding_dimensions: int = 1024
    embedding_max_chars: int = 8000
    embedding_timeout_seconds: int = 30

    vector_index_backend: str = "pinecone"
    pinecone_api_key: str = ""
    pinecone_index_name: str = "legal-documents"
    pinecone_namespace: str = ""
