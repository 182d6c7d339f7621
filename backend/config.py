import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.2
    gemini_max_output_tokens: int = 8192
    # Per-user Gemini keys, e.g. USER_API_KEYS='{"user-1": "AIza..."}'
    user_api_keys: dict[str, str] = {}

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Page fetching
    fetch_timeout_seconds: float = 45.0
    fetch_max_redirects: int = 5
    fetch_max_attempts: int = 3
    fetch_base_delay_seconds: float = 2.0

    # Extraction limits
    max_content_length: int = 100_000
    min_text_length: int = 50

    # Token bucket in front of the model: 5 burst, one token every 3s
    rate_limit_capacity: int = 5
    rate_limit_refill_per_second: float = 1 / 3
    extract_rate_limit: str = "10/minute"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
