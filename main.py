"""Main orchestrator: per-app news and build checks on a fixed poll interval."""

import logging
import os
import signal
import threading
import time
from typing import Optional

from config import AppConfig, is_dry_run, load_config
from discord_notifier import DeliveryError, format_build_message, format_news_message, notify
from fetchers.base import ParseError, UpstreamError
from fetchers.steam_apps import AppListFetcher
from fetchers.steam_news import SteamNewsFetcher
from fetchers.steamcmd import SteamCMDFetcher
from models import TrackedApp
from recency import is_eligible, which_branch_updated
from state import PersistenceError, StateStore

logger = logging.getLogger(__name__)

_shutdown = threading.Event()


def _handle_signal(signum, frame):
    logger.info("Received signal %d, shutting down gracefully...", signum)
    _shutdown.set()


def check_news(
    app: TrackedApp,
    news: SteamNewsFetcher,
    names: AppListFetcher,
    state: StateStore,
    config: AppConfig,
    now: float,
) -> bool:
    """Announce the app's latest news post if it is recent and unseen. Returns True if sent."""
    try:
        item = news.latest(app.appid)
    except (UpstreamError, ParseError) as e:
        logger.error("%d: news fetch failed: %s", app.appid, e)
        return False

    if item is None:
        logger.info("%d: no news posts", app.appid)
        return False

    # Old posts are never announced, seen or not
    if not is_eligible(item.date, now, config.recency_window_seconds):
        logger.info("%d: nothing new found in last hour", app.appid)
        return False

    try:
        is_new = state.check_and_mark(item.gid)
    except PersistenceError:
        logger.exception("%d: could not record gid %s, skipping notification", app.appid, item.gid)
        return False

    if not is_new:
        logger.info("%d: nothing new found (gid %s already announced)", app.appid, item.gid)
        return False

    name = names.display_name(app)
    try:
        notify(format_news_message(name, item), config)
    except DeliveryError as e:
        logger.error("%d: news notification for gid %s not delivered: %s", app.appid, item.gid, e)
        return False

    logger.info("%d: announced news post %s (%s)", app.appid, item.gid, item.title)
    return True


def check_build(
    app: TrackedApp,
    steamcmd: SteamCMDFetcher,
    names: AppListFetcher,
    config: AppConfig,
    announced: set[tuple[int, str, int]],
    now: float,
) -> bool:
    """Announce a branch build updated within the recency window. Returns True if sent.

    announced holds (appid, branch, time_updated) triples already posted by
    this process. Those branches are passed over, so each build is announced
    once and a later branch update is not hidden behind an earlier one.
    """
    if not steamcmd.is_available():
        logger.info("%d: %s not found, skipping build check", app.appid, config.steamcmd_path)
        return False

    try:
        snapshot = steamcmd.fetch(app.appid)
    except (UpstreamError, ParseError) as e:
        logger.error("%d: build info unavailable: %s", app.appid, e)
        return False

    already = {
        b.name for b in snapshot.in_priority_order()
        if (app.appid, b.name, b.time_updated) in announced
    }
    branch = which_branch_updated(snapshot, now, config.recency_window_seconds, skip=already)
    if branch is None:
        logger.info("%d: no unannounced branch update in last hour", app.appid)
        return False

    key = (app.appid, branch, getattr(snapshot, branch).time_updated)

    name = names.display_name(app)
    try:
        notify(format_build_message(name, branch), config)
    except DeliveryError as e:
        logger.error("%d: build notification for %s not delivered: %s", app.appid, branch, e)
        return False

    announced.add(key)
    logger.info("%d: announced %s build %s", app.appid, branch, getattr(snapshot, branch).build_id)
    return True


def poll_once(
    apps: list[TrackedApp],
    news: SteamNewsFetcher,
    steamcmd: SteamCMDFetcher,
    names: AppListFetcher,
    state: StateStore,
    config: AppConfig,
    announced: set[tuple[int, str, int]],
    now: Optional[float] = None,
) -> int:
    """Run one poll cycle over every app. Returns count of notifications sent."""
    if now is None:
        now = time.time()
    sent = 0

    for app in apps:
        # The two checks are independent; one failing must not skip the other
        try:
            if check_news(app, news, names, state, config, now):
                sent += 1
        except Exception:
            logger.exception("%d: news check failed", app.appid)

        try:
            if check_build(app, steamcmd, names, config, announced, now):
                sent += 1
        except Exception:
            logger.exception("%d: build check failed", app.appid)

    return sent


def run_forever(config: AppConfig, state: StateStore) -> None:
    news = SteamNewsFetcher(config)
    names = AppListFetcher(config)
    steamcmd = SteamCMDFetcher(config)
    announced: set[tuple[int, str, int]] = set()

    if not steamcmd.is_available():
        logger.warning(
            "SteamCMD not found at %s; build checks are disabled until it is installed",
            config.steamcmd_path,
        )

    while not _shutdown.is_set():
        sent = poll_once(config.apps, news, steamcmd, names, state, config, announced)
        if sent:
            logger.info("Sent %d notification(s), total seen: %d", sent, state.count())
        _shutdown.wait(config.poll_interval_seconds)


def setup_logging() -> None:
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_format = os.environ.get("LOG_FORMAT", "text").lower()
    log_file = os.environ.get("LOG_FILE")

    if log_format == "json":
        # Structured JSON logging for production/observability
        import json as json_lib

        class JsonFormatter(logging.Formatter):
            def format(self, record):
                log_obj = {
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                }
                if record.exc_info:
                    log_obj["exception"] = self.formatException(record.exc_info)
                return json_lib.dumps(log_obj)

        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.root.handlers = handlers
    logging.root.setLevel(getattr(logging, log_level, logging.INFO))


def main():
    setup_logging()

    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    config_path = os.environ.get("CONFIG_PATH", "config.json")
    env_path = os.environ.get("ENV_PATH", ".env")

    config = load_config(config_path, env_path)
    state = StateStore(config.news_record_path)

    if not config.apps:
        logger.warning("No apps configured, exiting")
        return

    logger.info(
        "Starting poll loop (interval=%ds, dry_run=%s, %d app(s), %d seen gid(s))",
        config.poll_interval_seconds,
        is_dry_run(),
        len(config.apps),
        state.count(),
    )

    run_forever(config, state)
    logger.info("Shut down cleanly")


if __name__ == "__main__":
    main()
