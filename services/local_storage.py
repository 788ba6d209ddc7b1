"""
Local Storage
=============
String key-value slots persisted to one JSON file per browser.

Each browser gets its own file, named after the browser id carried in the
page URL, so the store behaves like the browser's localStorage: one store
per browser, shared by its tabs, last writer wins. It is the fallback store
when Supabase is unconfigured or unreachable and also keeps the auth session
across reloads.
"""

import json
import logging
import re
import threading
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

PROFILE_KEY = "opensix_profile"
PREDICTION_KEY = "opensix_last_prediction"
AUTH_KEY = "opensix_auth"

BROWSER_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def is_valid_browser_id(browser_id: Optional[str]) -> bool:
    """Browser ids are uuid4 hex strings; anything else is rejected before it reaches a file name."""
    return bool(browser_id) and BROWSER_ID_PATTERN.match(browser_id) is not None


class LocalStorage:
    """JSON-file backed string store with a localStorage-like interface."""

    # Streamlit runs sessions as threads of one process; tabs of the same
    # browser share a file.
    _lock = threading.Lock()

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def for_browser(cls, directory: Path, browser_id: str) -> "LocalStorage":
        if not is_valid_browser_id(browser_id):
            raise ValueError(f"Invalid browser id: {browser_id!r}")
        return cls(Path(directory) / f"{browser_id}.json")

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Local storage at %s is unreadable, starting empty: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)
