"""Runtime configuration for the BuJo Streamlit client."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bujo.config_utils import env_bool, env_int, env_optional_str, env_path, env_positive_float, env_str


@dataclass(frozen=True)
class BujoConfig:
    """Env-first settings for talking to the BulletJournal backend.

    Environment variables:
    - BUJO_API_BASE_URL (default http://localhost:8080)
    - BUJO_API_TOKEN (optional bearer token)
    - BUJO_USERNAME (optional; forwarded as X-Forwarded-User for SSO-less dev setups)
    - BUJO_VERIFY_SSL (default true)
    - BUJO_HTTP_TIMEOUT_SECONDS (default 15)
    - BUJO_MAX_WORKERS: background request threads (default 4)
    - BUJO_LOG_DIR (default .local/bujo)
    - BUJO_LOG_LEVEL (default INFO)
    """

    api_base_url: str
    api_token: Optional[str]
    username: Optional[str]
    verify_ssl: bool
    timeout_seconds: float
    max_workers: int
    log_dir: Path
    log_level: str

    DEFAULT_API_BASE_URL: str = "http://localhost:8080"
    DEFAULT_TIMEOUT_SECONDS: float = 15.0
    DEFAULT_MAX_WORKERS: int = 4

    @classmethod
    def from_env(cls) -> "BujoConfig":
        base_url = env_str("BUJO_API_BASE_URL", cls.DEFAULT_API_BASE_URL).rstrip("/")

        return cls(
            api_base_url=base_url or cls.DEFAULT_API_BASE_URL,
            api_token=env_optional_str("BUJO_API_TOKEN"),
            username=env_optional_str("BUJO_USERNAME"),
            verify_ssl=env_bool("BUJO_VERIFY_SSL", True),
            timeout_seconds=env_positive_float("BUJO_HTTP_TIMEOUT_SECONDS", cls.DEFAULT_TIMEOUT_SECONDS),
            max_workers=env_int("BUJO_MAX_WORKERS", cls.DEFAULT_MAX_WORKERS, minimum=1),
            log_dir=env_path("BUJO_LOG_DIR", ".local/bujo"),
            log_level=env_str("BUJO_LOG_LEVEL", "INFO").upper(),
        )


_config: Optional[BujoConfig] = None


def get_config() -> BujoConfig:
    """Get the client configuration (cached)."""
    global _config
    if _config is None:
        _config = BujoConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None
