# core/http_client.py

from typing import NamedTuple, Optional

import requests

from config import REQUEST_TIMEOUT, USER_AGENT
from .errors import TransportError

class FetchResult(NamedTuple):
    content: bytes
    url: str

class HttpClient:
    """
    Thin wrapper around a requests.Session. Only a 200 response counts as a
    success; everything else is raised as a TransportError.
    """
    def __init__(self, timeout: float = REQUEST_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', USER_AGENT)

    def fetch(self, url: str) -> FetchResult:
        """GETs a url and returns its body along with the final url after redirects."""
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            raise TransportError(f"File not found: {url} (status {response.status_code})")
        return FetchResult(response.content, response.url or url)
