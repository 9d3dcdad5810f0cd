"""Append-only flat-file deduplication store for news gids."""

import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The seen-gid record could not be read or appended to."""


class StateStore:
    """Tracks announced news gids to prevent duplicate notifications.

    The in-memory set mirrors a text file holding one gid per line. The file
    is read once on construction and appended to on every mark.
    """

    def __init__(self, path: str = "news_gid.txt"):
        self._path = Path(path)
        self._seen: set[str] = set()
        self._lock = threading.Lock()
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            logger.info("No seen-gid record at %s, starting empty", self._path)
            return
        try:
            with open(self._path, encoding="utf-8") as f:
                for line in f:
                    gid = line.strip()
                    if gid:
                        self._seen.add(gid)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {self._path}: {e}") from e
        logger.info("Loaded %d seen gid(s) from %s", len(self._seen), self._path)

    def is_seen(self, gid: str) -> bool:
        return gid in self._seen

    def mark_seen(self, gid: str) -> None:
        """Mark a gid as seen and append it to the record. Idempotent."""
        with self._lock:
            self._mark(gid)

    def check_and_mark(self, gid: str) -> bool:
        """Mark gid as seen if it is new. Returns True only if this call marked it."""
        with self._lock:
            if gid in self._seen:
                return False
            self._mark(gid)
            return True

    def _mark(self, gid: str) -> None:
        if gid in self._seen:
            return
        self._seen.add(gid)
        try:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(gid + "\n")
                f.flush()
        except OSError as e:
            self._seen.discard(gid)
            raise PersistenceError(f"Could not write gid {gid} to {self._path}: {e}") from e
        logger.debug("GID %s written to %s", gid, self._path)

    def count(self) -> int:
        return len(self._seen)
