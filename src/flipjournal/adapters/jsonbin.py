"""JSONBin.io adapter - HTTP client for cloud backups."""

import logging
from typing import Callable

import requests

logger = logging.getLogger(__name__)

API_BASE = "https://api.jsonbin.io/v3"
BIN_NAME = "handwritten-journal-backup"
PLACEHOLDER_KEY = "YOUR_API_KEY_HERE"


class JsonBinError(Exception):
    """Raised when a JSONBin request fails."""

    pass


class JsonBinTarget:
    """
    JSONBin.io cloud backup.

    Implements BackupTarget protocol. Keeps the whole bundle in one private
    bin; the bin is created on first push and its id handed to
    `on_bin_created` so it can be remembered for later updates.
    """

    name = "cloud"

    def __init__(
        self,
        api_key: str,
        bin_id: str = "",
        on_bin_created: Callable[[str], None] | None = None,
        session: requests.Session | None = None,
        timeout: float = 10,
    ):
        self.api_key = api_key
        self.bin_id = bin_id
        self.on_bin_created = on_bin_created
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and PLACEHOLDER_KEY not in self.api_key

    def _headers(self) -> dict:
        return {"Content-Type": "application/json", "X-Master-Key": self.api_key}

    def create_bin(self, bundle: dict) -> str:
        """Create a new private bin holding `bundle`. Returns its id."""
        headers = self._headers()
        headers["X-Bin-Name"] = BIN_NAME
        headers["X-Bin-Private"] = "true"

        resp = self._session.post(f"{API_BASE}/b", json=bundle, headers=headers, timeout=self.timeout)
        if not resp.ok:
            raise JsonBinError(f"Failed to create JSONBin: {resp.status_code} {resp.text}")

        bin_id = resp.json()["metadata"]["id"]
        logger.info(f"Created new JSONBin with ID: {bin_id}")
        return bin_id

    def update_bin(self, bundle: dict) -> None:
        """Replace the full contents of the known bin."""
        resp = self._session.put(
            f"{API_BASE}/b/{self.bin_id}", json=bundle, headers=self._headers(), timeout=self.timeout
        )
        if not resp.ok:
            raise JsonBinError(f"Failed to update JSONBin: {resp.status_code} {resp.text}")

    def read_latest(self) -> object:
        """Fetch the latest version of the known bin's record."""
        resp = self._session.get(
            f"{API_BASE}/b/{self.bin_id}/latest",
            headers={"X-Master-Key": self.api_key},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise JsonBinError(f"Failed to load cloud backup: {resp.status_code}")
        return resp.json().get("record")

    def push(self, bundle: dict) -> None:
        if self.bin_id:
            self.update_bin(bundle)
            return

        self.bin_id = self.create_bin(bundle)
        if self.on_bin_created:
            self.on_bin_created(self.bin_id)

    def pull(self) -> object:
        if not self.bin_id:
            raise JsonBinError("No cloud backup found. Save first!")
        return self.read_latest()
