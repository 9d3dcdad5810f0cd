"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from config import AppConfig
from models import NewsItem, TrackedApp
from state import StateStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"

NOW = 1_780_000_000

APP_INFO_TEMPLATE = """AppID : 740, change number : 24001234/0, last change : Mon Jun  1 12:00:00 2026
"740"
{
\t"appid"\t\t"740"
\t"common"
\t{
\t\t"name"\t\t"Counter-Strike Global Offensive - Dedicated Server"
\t\t"type"\t\t"Tool"
\t}
\t"depots"
\t{
\t\t"741"
\t\t{
\t\t\t"manifests"
\t\t\t{
\t\t\t\t"public"\t\t"7617088375292372759"
\t\t\t}
\t\t}
\t\t"branches"
\t\t{
\t\t\t"public"
\t\t\t{
\t\t\t\t"buildid"\t\t"11111111"
\t\t\t\t"timeupdated"\t\t"{public}"
\t\t\t}
\t\t\t"beta"
\t\t\t{
\t\t\t\t"buildid"\t\t"22222222"
\t\t\t\t"description"\t\t"Beta branch"
\t\t\t\t"timeupdated"\t\t"{beta}"
\t\t\t}
\t\t\t"private"
\t\t\t{
\t\t\t\t"buildid"\t\t"33333333"
\t\t\t\t"pwdrequired"\t\t"1"
\t\t\t\t"timeupdated"\t\t"{private}"
\t\t\t}
\t\t}
\t}
}
"""


def make_app_info(public: int, beta: int, private: int) -> str:
    """Render a steamcmd app_info_print dump with the given branch timestamps."""
    return (
        APP_INFO_TEMPLATE.replace("{public}", str(public))
        .replace("{beta}", str(beta))
        .replace("{private}", str(private))
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_config(tmp_path):
    return AppConfig(
        poll_interval_seconds=900,
        request_timeout_seconds=5,
        rate_limit_backoff_seconds=0,
        rate_limit_max_attempts=3,
        steamcmd_path=str(tmp_path / "steamcmd.sh"),
        news_record_path=str(tmp_path / "news_gid.txt"),
        webhook_env="DISCORD_WEBHOOK_TEST",
        apps=[{"appid": 717790, "name": "Test Game"}],
    )


@pytest.fixture
def sample_app():
    return TrackedApp(appid=717790, name="Test Game")


@pytest.fixture
def sample_item(now):
    return NewsItem(
        gid="5123456789012345678",
        title="Patch notes 1.2",
        url="https://store.steampowered.com/news/app/717790/view/5123456789012345678",
        date=now - 600,
        appid=717790,
    )


@pytest.fixture
def record_path(tmp_path):
    return tmp_path / "news_gid.txt"


@pytest.fixture
def file_state(record_path):
    return StateStore(str(record_path))


@pytest.fixture
def fixture_path():
    """Return a function that resolves fixture file paths."""
    def _resolve(name: str) -> Path:
        return FIXTURES_DIR / name
    return _resolve


@pytest.fixture
def load_fixture():
    """Return a function that loads a JSON fixture."""
    def _load(name: str):
        with open(FIXTURES_DIR / name) as f:
            return json.load(f)
    return _load


@pytest.fixture
def load_fixture_text():
    """Return a function that loads a fixture as raw text."""
    def _load(name: str) -> str:
        with open(FIXTURES_DIR / name) as f:
            return f.read()
    return _load


@pytest.fixture
def app_info():
    """Return a function that renders app_info_print output for given timestamps."""
    return make_app_info
