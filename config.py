"""Configuration loading and validation."""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from models import TrackedApp

logger = logging.getLogger(__name__)


class AppConfig(BaseModel):
    poll_interval_seconds: int = 900
    recency_window_seconds: int = 3600
    request_timeout_seconds: float = 5
    rate_limit_backoff_seconds: float = 10
    rate_limit_max_attempts: int = 5
    steamcmd_path: str = "steamcmd.sh"
    steamcmd_timeout_seconds: float = 120
    news_record_path: str = "news_gid.txt"
    webhook_env: str = "DISCORD_WEBHOOK"
    apps: list[TrackedApp] = []

    @field_validator("apps", mode="before")
    @classmethod
    def accept_bare_appids(cls, v: list[Union[int, dict]]) -> list[dict]:
        # "apps": [717790] is shorthand for [{"appid": 717790}]
        return [{"appid": item} if isinstance(item, int) else item for item in v or []]


def load_config(
    config_path: str = "config.json",
    env_path: Optional[str] = ".env",
) -> AppConfig:
    """Load .env and config.json, return validated AppConfig."""
    if env_path:
        env_file = Path(env_path)
        if env_file.exists():
            load_dotenv(env_file)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file) as f:
        raw = json.load(f)

    config = AppConfig(**raw)

    if not os.environ.get(config.webhook_env):
        logger.warning("Webhook env var %s is not set", config.webhook_env)
    if not config.apps:
        logger.warning("No apps configured in %s", config_path)

    return config


def get_webhook_url(config: AppConfig) -> Optional[str]:
    """Resolve the Discord webhook URL from the configured env var."""
    url = os.environ.get(config.webhook_env)
    if not url:
        logger.warning("Webhook env var %s is not set", config.webhook_env)
        return None
    return url


def is_dry_run() -> bool:
    """Check if DRY_RUN is enabled."""
    return os.environ.get("DRY_RUN", "false").lower() in ("true", "1", "yes")
