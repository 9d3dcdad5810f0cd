"""Build metadata via the SteamCMD command-line client."""

import logging
import subprocess
from pathlib import Path

from buildinfo import parse_build_info
from config import AppConfig
from fetchers.base import UpstreamError
from models import BuildSnapshot

logger = logging.getLogger(__name__)


class SteamCMDFetcher:
    """Runs steamcmd with an anonymous login and captures app_info_print output."""

    def __init__(self, config: AppConfig):
        self._path = Path(config.steamcmd_path)
        self._timeout = config.steamcmd_timeout_seconds

    def is_available(self) -> bool:
        return self._path.is_file()

    def command(self, appid: int) -> list[str]:
        return [
            str(self._path.resolve()),
            "+login", "anonymous",
            "+app_info_request", str(appid),
            "+app_info_print", str(appid),
            "+exit",
        ]

    def app_info(self, appid: int) -> str:
        """Raw app_info_print dump for appid. Raises UpstreamError if steamcmd fails."""
        source = f"steamcmd app_info_print {appid}"
        try:
            result = subprocess.run(
                self.command(appid),
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise UpstreamError(None, source, f"timed out after {self._timeout}s") from e
        except OSError as e:
            raise UpstreamError(None, source, str(e)) from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise UpstreamError(result.returncode, source, stderr[-500:])

        logger.debug("steamcmd returned %d bytes for %d", len(result.stdout), appid)
        return result.stdout.decode("utf-8", errors="replace")

    def fetch(self, appid: int) -> BuildSnapshot:
        return parse_build_info(self.app_info(appid))
