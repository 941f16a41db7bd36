"""Configuration management for the submission workflow."""

from typing import Literal, Optional
from pydantic import ValidationError
from pydantic_settings import BaseSettings


REQUIRED_VARS = [
    "INDEXER_URL",
]


class Config(BaseSettings):
    """Application configuration from environment variables."""

    # Required
    indexer_url: str

    # Optional
    gap_env: Literal["production", "staging"] = "production"
    indexer_timeout_seconds: float = 30.0
    indexer_poll_max_attempts: int = 1000
    indexer_poll_interval_seconds: float = 1.5
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}

    @property
    def error_tracking_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def validate_config() -> Config:
    """Load and validate configuration from environment.

    Raises ValueError with descriptive message listing ALL missing
    required variables (not just the first one).
    """
    try:
        return Config()  # type: ignore[call-arg]
    except ValidationError as exc:
        missing = []
        err_str = str(exc)
        for var in REQUIRED_VARS:
            if var.lower() in err_str.lower():
                missing.append(var)
        if missing:
            names = ", ".join(missing)
            raise ValueError(
                f"Missing required environment variable(s): {names}. "
                "Please set them in your .env file or environment."
            ) from exc
        raise


def load_config() -> Config:
    """Load configuration from environment (startup entry point)."""
    return validate_config()
