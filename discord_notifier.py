"""Discord webhook message formatting and delivery."""

import logging
from typing import Optional

import requests

from config import AppConfig, get_webhook_url, is_dry_run
from fetchers.base import USER_AGENT
from models import NewsItem

logger = logging.getLogger(__name__)

# Discord rejects message content longer than this
MAX_CONTENT_LENGTH = 2000
WEBHOOK_TIMEOUT = 5


class DeliveryError(Exception):
    """The webhook did not accept the message."""

    def __init__(self, status: Optional[int], detail: str = ""):
        self.status = status
        self.detail = detail
        super().__init__(f"Discord webhook delivery failed ({status}): {detail}")


def format_news_message(app_name: str, item: NewsItem) -> str:
    return f"New news post detected for {app_name}\n{item.title}\n{item.url}"


def format_build_message(app_name: str, branch: str) -> str:
    return f"New build detected for {app_name} on the {branch} branch"


def _truncate(content: str) -> str:
    if len(content) > MAX_CONTENT_LENGTH:
        return content[: MAX_CONTENT_LENGTH - 3] + "..."
    return content


def notify(content: str, config: AppConfig) -> None:
    """Post content to the configured Discord webhook.

    Raises DeliveryError if no webhook is configured, the request fails, or
    Discord answers with a non-2xx status. Failed deliveries are not retried.
    """
    if is_dry_run():
        logger.info("[DRY RUN] Would notify: %s", content.replace("\n", " | "))
        return

    webhook_url = get_webhook_url(config)
    if not webhook_url:
        raise DeliveryError(None, f"webhook env var {config.webhook_env} is not set")

    payload = {"content": _truncate(content)}
    try:
        resp = requests.post(
            webhook_url,
            json=payload,
            headers={"User-Agent": USER_AGENT},
            timeout=WEBHOOK_TIMEOUT,
        )
    except requests.RequestException as e:
        raise DeliveryError(None, str(e)) from e

    if not 200 <= resp.status_code < 300:
        raise DeliveryError(resp.status_code, resp.text[:500])

    logger.info("Posted notification to Discord (%d)", resp.status_code)
