"""HTTP client for the Weburle relay API."""

import os

import requests

API_URL = os.environ.get("API_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "120"))
HEALTH_TIMEOUT = float(os.environ.get("HEALTH_TIMEOUT", "3"))


class RelayRequestError(Exception):
    """Relay returned a non-2xx status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, payload: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class RelayClient:
    """Thin wrapper over the relay's three endpoints."""

    def __init__(self, base_url: str = API_URL, timeout: float = REQUEST_TIMEOUT,
                 health_timeout: float = HEALTH_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.health_timeout = health_timeout

    def _request(self, method: str, path: str, body: dict | None = None, timeout: float | None = None) -> dict:
        try:
            resp = requests.request(method, f"{self.base_url}{path}", json=body,
                                    timeout=timeout or self.timeout)
        except requests.RequestException as e:
            raise RelayRequestError(f"Cannot reach relay: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not resp.ok:
            raise RelayRequestError(
                data.get("error") or f"Relay error ({resp.status_code})",
                status_code=resp.status_code,
                payload=data,
            )
        return data

    def generate(self, prompt: str) -> dict:
        """POST /api/generate and return {html, css, js}."""
        return self._request("POST", "/api/generate", {"prompt": prompt})

    def chat(self, message: str) -> str:
        """POST /api/chat and return the reply text."""
        return self._request("POST", "/api/chat", {"message": message}).get("reply", "")

    def health(self) -> dict:
        """GET /api/health with the short timeout; an error status is returned, not raised."""
        try:
            return self._request("GET", "/api/health", timeout=self.health_timeout)
        except RelayRequestError as e:
            if e.payload.get("status"):
                return e.payload
            return {"status": "offline", "message": str(e)}
