# adminsdk/client.py
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for any failed call: transport error, non-2xx status or bad body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AdminClient:
    """Thin REST client for the store backend.

    `session` may be any object with a requests-style `request()` method
    (a `requests.Session`, or FastAPI's `TestClient` in tests).
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8085", api_key: Optional[str] = None,
                 timeout: int = 10, session: Any = None, upload_url: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.upload_url = upload_url or f"{self.base_url}/uploads"
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, url: str, **kwargs):
        logger.debug("%s %s", method, url)
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (requests.RequestException, httpx.HTTPError) as e:
            raise ApiError(f"{method} {url} failed: {e}") from e
        try:
            r.raise_for_status()
        except (requests.HTTPError, httpx.HTTPStatusError) as e:
            raise ApiError(f"{method} {url} returned {r.status_code}", status_code=r.status_code) from e
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(f"{method} {url} returned a non-JSON body", status_code=r.status_code) from e

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        kwargs = {}
        if body is not None:
            kwargs["json"] = body
        return self._send(method.upper(), self._url(path), **kwargs)

    # Collection endpoints
    def list(self, path: str) -> List[Dict[str, Any]]:
        data = self.request("GET", path)
        if not isinstance(data, list):
            raise ApiError(f"GET {path} did not return a list")
        return data

    def create(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", path, body)

    # Item endpoints
    def update(self, path: str, record_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PUT", f"{path.rstrip('/')}/{record_id}", body)

    def delete(self, path: str, record_id: str) -> None:
        self.request("DELETE", f"{path.rstrip('/')}/{record_id}")

    # Object storage
    def upload_image(self, file_path: str) -> str:
        p = Path(file_path)
        try:
            fh = p.open("rb")
        except OSError as e:
            raise ApiError(f"cannot read {file_path}: {e}") from e
        with fh:
            data = self._send("POST", self.upload_url, files={"file": (p.name, fh)})
        if not isinstance(data, dict) or not data.get("url"):
            raise ApiError("upload response did not include a url")
        return data["url"]
