import threading
from pathlib import Path

import pytest

from core.errors import ColorAnalysisError, TransportError
from core.http_client import FetchResult
from models import RegionTarget

FIXTURES = Path(__file__).parent / "fixtures"

def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")

class FakeHttpClient:
    """Serves canned bodies by url; any other url behaves like a 404."""

    def __init__(self, responses=None, redirects=None):
        self.responses = dict(responses or {})
        self.redirects = dict(redirects or {})
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.calls.append(url)
        if url not in self.responses:
            raise TransportError(f"File not found: {url} (status 404)")
        return FetchResult(self.responses[url], self.redirects.get(url, url))

class FakeAnalyzer:
    def __init__(self, colors_by_url=None):
        self.colors_by_url = dict(colors_by_url or {})
        self.calls = []
        self._lock = threading.Lock()

    def analyze(self, image_url):
        with self._lock:
            self.calls.append(image_url)
        if image_url not in self.colors_by_url:
            raise ColorAnalysisError("Bad request")
        return self.colors_by_url[image_url]

@pytest.fixture
def region_target():
    return RegionTarget(
        dir_name="old_north",
        region="旧北区",
        url="http://biokite.com/worldbutterfly/butterfly-PArc.htm#PAall",
    )

@pytest.fixture
def region_html():
    return read_fixture("region_sample.html")

@pytest.fixture
def csv_path():
    return FIXTURES / "butterfly_sample.csv"

@pytest.fixture
def fake_http():
    return FakeHttpClient

@pytest.fixture
def fake_analyzer():
    return FakeAnalyzer
