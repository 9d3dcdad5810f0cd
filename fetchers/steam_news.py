"""Fetcher for the ISteamNews/GetNewsForApp API."""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from fetchers.base import BaseFetcher, ParseError
from models import NewsItem

logger = logging.getLogger(__name__)

NEWS_URL = "https://api.steampowered.com/ISteamNews/GetNewsForApp/v2/?appid={appid}&count={count}"


class SteamNewsFetcher(BaseFetcher):
    def fetch(self, appid: int, count: int = 1) -> list[NewsItem]:
        body = self._get(NEWS_URL.format(appid=appid, count=count))
        return parse_news(body, appid)

    def latest(self, appid: int) -> Optional[NewsItem]:
        """Most recent news item for appid, or None if the app has no news."""
        items = self.fetch(appid, count=1)
        if not items:
            return None
        return max(items, key=lambda item: item.date)


def parse_news(body: bytes, appid: int) -> list[NewsItem]:
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ParseError(f"news response for {appid} is not JSON: {e}") from e

    appnews = data.get("appnews") if isinstance(data, dict) else None
    if not isinstance(appnews, dict):
        raise ParseError(f"news response for {appid} has no appnews object")

    newsitems = appnews.get("newsitems", [])
    if not isinstance(newsitems, list):
        raise ParseError(f"news response for {appid} has a non-list newsitems field")

    items = []
    for raw in newsitems:
        try:
            items.append(NewsItem(appid=appid, **_news_fields(raw)))
        except (AttributeError, TypeError, ValidationError) as e:
            raise ParseError(f"malformed news item for {appid}: {e}") from e
    return items


def _news_fields(raw: dict) -> dict:
    return {
        "gid": raw.get("gid"),
        "title": raw.get("title") or "",
        "url": raw.get("url") or "",
        "date": raw.get("date"),
        "author": raw.get("author") or "",
        "feedlabel": raw.get("feedlabel") or "",
    }
