"""HTTP client for the nanohub DDM and NanoCMD APIs."""

from __future__ import annotations

import base64
import json
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from nanohubctl.config import Settings, ddm_url, nanocmd_url


class ApiError(Exception):
    """Raised when a request fails or its response cannot be read."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


def _with_query(url: str, query: Mapping[str, str], keep_existing: bool) -> str:
    parts = urlsplit(url)
    pairs = []
    if keep_existing:
        pairs = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if key not in query
        ]
    pairs.extend(query.items())
    pairs.sort(key=lambda pair: pair[0])
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment)
    )


class NanoHubClient:
    """Sends authenticated requests to a nanohub server."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session if session is not None else requests.Session()

    def _authorization(self) -> str:
        credentials = f"{self.settings.api_user}:{self.settings.api_key}"
        return "Basic " + base64.b64encode(credentials.encode()).decode("ascii")

    def ddm_url(self, *args: str, query: Optional[Mapping[str, str]] = None) -> str:
        """Return a DDM API URL, merging ``query`` into any query of the base URL."""
        url = ddm_url(self.settings.url, *args)
        return _with_query(url, query, keep_existing=True) if query else url

    def nanocmd_url(self, *args: str, query: Optional[Mapping[str, str]] = None) -> str:
        """Return a NanoCMD API URL whose query is replaced by ``query``."""
        url = nanocmd_url(self.settings.url, *args)
        return _with_query(url, query, keep_existing=False) if query is not None else url

    def _request(
        self,
        method: str,
        url: str,
        data: Optional[bytes] = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> requests.Response:
        headers = {"Authorization": self._authorization()}
        if extra_headers:
            headers.update(extra_headers)
        try:
            return self.session.request(method, url, headers=headers, data=data)
        except requests.RequestException as exc:
            raise ApiError(f"{method} {url} failed: {exc}") from exc

    def get(self, url: str, enrollment_id: Optional[str] = None) -> requests.Response:
        """Send a GET, adding the X-Enrollment-ID header when an enrollment is given."""
        extra = {"X-Enrollment-ID": enrollment_id} if enrollment_id is not None else None
        return self._request("GET", url, extra_headers=extra)

    def put(self, url: str, data: Optional[bytes] = None) -> requests.Response:
        """Send a PUT with an optional body."""
        return self._request("PUT", url, data=data)

    def post(self, url: str) -> requests.Response:
        """Send an empty POST."""
        return self._request("POST", url)

    def delete(self, url: str) -> requests.Response:
        """Send a DELETE."""
        return self._request("DELETE", url)

    def get_json(self, url: str, enrollment_id: Optional[str] = None) -> Any:
        """GET ``url`` and decode the body as JSON."""
        response = self.get(url, enrollment_id)
        try:
            return json.loads(response.content)
        except ValueError as exc:
            raise ApiError(
                f"invalid JSON from {url}: {exc}", status=response.status_code
            ) from exc