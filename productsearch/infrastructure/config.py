"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Elasticsearch
    elasticsearch_url: str = "http://localhost:9200"
    elasticsearch_api_key: str | None = None
    elasticsearch_verify_certs: bool = True
    index_request_timeout: float = 10.0
    products_index: str = "products"

    # Search (None keeps the engine's default page size)
    search_size: int | None = None

    # Single-document writes: create missing documents on update instead of
    # reporting a no-op, and refresh so writes are searchable at once
    update_upsert: bool = False
    write_refresh: bool = False

    # Bulk ingestion
    bulk_wait_for_active_shards: int = 1
    bulk_refresh: bool = True
    spreadsheet_header_rows: int = 0

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
