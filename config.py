from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Loan Case Tracker API"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./loan_cases.db"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Document uploads (S3-compatible object storage)
    max_total_upload_bytes: int = 5 * 1024 * 1024
    document_folder: str = "case-documents"
    storage_endpoint: Optional[str] = None
    storage_access_key: Optional[str] = None
    storage_secret_key: Optional[str] = None
    storage_bucket: str = "loan-cases"
    storage_region: str = "us-east-1"
    storage_public_url: Optional[str] = None

    # Loan feature suggestions
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
