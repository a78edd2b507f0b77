from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Anthropic (LLM)
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    anthropic_max_tokens: int = 4000

    # Upstream HTTP deadlines (seconds)
    upstream_timeout_seconds: float = 60.0
    upstream_connect_timeout_seconds: float = 10.0

    # Lore document (must be shared publicly)
    document_url: str = (
        "https://docs.google.com/document/d/"
        "1zKVB97yASZQTTfjfsqL-NFZyVSIYAVyttKyqRVNvINg/edit?usp=sharing"
    )

    # Frontend URL (for CORS)
    frontend_url: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
