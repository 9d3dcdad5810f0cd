"""App id to display name lookup via ISteamApps/GetAppList."""

import json
import logging

from fetchers.base import BaseFetcher, ParseError, UpstreamError
from models import TrackedApp

logger = logging.getLogger(__name__)

APP_LIST_URL = "https://api.steampowered.com/ISteamApps/GetAppList/v2/"


def not_found_name(appid: int) -> str:
    return f"{appid} not found!"


class AppListFetcher(BaseFetcher):
    """Resolves display names lazily, downloading the app list at most once."""

    def __init__(self, config):
        super().__init__(config)
        self._names: dict[int, str] = {}
        self._loaded = False

    def fetch(self) -> dict[int, str]:
        body = self._get(APP_LIST_URL)
        return parse_app_list(body)

    def display_name(self, app: TrackedApp) -> str:
        if app.name:
            return app.name
        return self.resolve_name(app.appid)

    def resolve_name(self, appid: int) -> str:
        if appid not in self._names and not self._loaded:
            try:
                self._names.update(self.fetch())
                self._loaded = True
            except (UpstreamError, ParseError):
                # Leave _loaded unset so the next lookup tries again
                logger.exception("Could not load the Steam app list")
        return self._names.get(appid, not_found_name(appid))


def parse_app_list(body: bytes) -> dict[int, str]:
    try:
        data = json.loads(body)
        apps = data["applist"]["apps"]
    except (ValueError, KeyError, TypeError) as e:
        raise ParseError(f"unexpected GetAppList response: {e}") from e

    names = {}
    for app in apps:
        if not isinstance(app, dict):
            continue
        appid = app.get("appid")
        name = app.get("name")
        if isinstance(appid, int) and name:
            names[appid] = name
    return names
