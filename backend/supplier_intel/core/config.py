from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "Supplier Intelligence"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_json: bool = True

    # LLM (multi-provider: openai | anthropic | google)
    llm_provider: str = "openai"
    llm_model: str = ""  # auto-defaults per provider if empty
    llm_temperature: float = 0.1
    llm_max_tokens: int = 3000
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    google_ai_api_key: str = ""

    # Google SERP API (serpapi.com)
    serp_api_key: str = ""
    serp_base_url: str = "https://serpapi.com/search.json"
    serp_results_per_query: int = 15
    search_delay_seconds: float = 1.0

    # Discovery
    discovery_max_suppliers: int = 3
    pdf_discovery_max_suppliers: int = 1
    enrichment_delay_seconds: float = 1.0
    url_analysis_delay_seconds: float = 2.0
    website_timeout_seconds: float = 10.0
    pdf_max_file_size_mb: int = 20

    # External database extraction
    database_row_limit: int = 1000

    # Spreadsheet exports
    export_max_tables: int = 50
    export_max_rows_per_table: int = 10_000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
