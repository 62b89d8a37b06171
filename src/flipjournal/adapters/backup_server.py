"""Backup server adapter - HTTP client for the journal's own server."""

import requests


class BackupServerError(Exception):
    """Raised when the backup server rejects a request."""

    pass


class BackupServerTarget:
    """
    Same-origin backup server.

    Implements BackupTarget protocol. Always enabled: an unreachable server
    surfaces as a requests exception for the caller to treat as non-fatal.
    """

    name = "server"
    enabled = True

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def push(self, bundle: dict) -> None:
        resp = self._session.post(f"{self.base_url}/api/backup", json=bundle, timeout=self.timeout)
        result = resp.json()
        if resp.status_code != 200 or not result.get("success"):
            raise BackupServerError(f"Backup rejected: {result.get('message', resp.status_code)}")

    def pull(self) -> object:
        resp = self._session.get(f"{self.base_url}/api/backup", timeout=self.timeout)
        if resp.status_code == 404:
            raise BackupServerError("No local backup found")
        if resp.status_code != 200:
            raise BackupServerError(f"Backup server error: {resp.status_code}")

        data = resp.json()
        if isinstance(data, dict) and data.get("success") is False:
            raise BackupServerError("No local backup found")
        return data

    def fetch_config(self) -> dict:
        """Cloud credentials the server was configured with."""
        resp = self._session.get(f"{self.base_url}/api/config", timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise BackupServerError("Unexpected config response from backup server")
        return {"apiKey": data.get("apiKey", ""), "binId": data.get("binId", "")}
