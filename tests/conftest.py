"""
Pytest Configuration and Shared Fixtures

Provides fakes so no test touches the network:
- FakeSource: in-memory BlocklistSource
- FakeSession: stands in for an aiohttp session in the FireHOL query tests
"""

import pytest
from typing import Dict, List, Union, Optional

from utils.config import load_settings
from utils.modules.base import BlocklistSource, BlocklistFile, ErrorKind, StageError


# ============================================================================
# Fake blocklist source
# ============================================================================

def make_file(path: str) -> BlocklistFile:
    return BlocklistFile(
        path=path,
        size=0,
        sha="0" * 40,
        url=f"https://api.github.com/repos/firehol/blocklist-ipsets/git/blobs/{path}",
        download_url=f"https://raw.githubusercontent.com/firehol/blocklist-ipsets/master/{path}",
    )


class FakeSource(BlocklistSource):
    """In-memory source: maps file path to its sanitized lines (or a StageError)."""

    SOURCE_NAME = "Fake"

    def __init__(self, contents: Dict[str, Union[List[str], StageError]], catalog_error: Optional[StageError] = None):
        self.contents = contents
        self.catalog_error = catalog_error
        self.list_calls = 0
        self.read_paths: List[str] = []

    async def list_files(self):
        self.list_calls += 1
        if self.catalog_error is not None:
            return self.catalog_error
        return [make_file(path) for path in self.contents]

    async def read_file(self, blocklist_file):
        self.read_paths.append(blocklist_file.path)
        return self.contents[blocklist_file.path]

    @property
    def network_calls(self) -> int:
        return self.list_calls + len(self.read_paths)


@pytest.fixture
def blocklist_contents() -> Dict[str, List[str]]:
    """Three files; 127.0.0.1 appears in the second and third."""
    return {
        "alpha.ipset": ["10.0.0.1", "10.0.0.2", "10.0.0.3"],
        "botscout_30d.ipset": ["192.168.1.1", "127.0.0.1"],
        "gamma.ipset": ["127.0.0.1", "8.8.8.8", "1.1.1.1", "9.9.9.9"],
    }


@pytest.fixture
def fake_source(blocklist_contents) -> FakeSource:
    return FakeSource(blocklist_contents)


@pytest.fixture
def upstream_error() -> StageError:
    return StageError(ErrorKind.UPSTREAM_UNAVAILABLE, "blocklist catalog returned status 503")


# ============================================================================
# Fake aiohttp session
# ============================================================================

class FakeResponse:
    def __init__(self, status: int = 200, json_body=None, text_body: str = "", json_error: Optional[Exception] = None):
        self.status = status
        self._json_body = json_body
        self._text_body = text_body
        self._json_error = json_error

    async def json(self, content_type=None):
        if self._json_error is not None:
            raise self._json_error
        return self._json_body

    async def text(self, errors="strict"):
        return self._text_body


class _RequestContext:
    def __init__(self, outcome):
        self.outcome = outcome

    async def __aenter__(self):
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Returns a canned FakeResponse (or raises a canned exception) per URL."""

    def __init__(self, routes: Dict[str, object]):
        self.routes = routes
        self.requests: List[Dict[str, object]] = []

    def get(self, url, headers=None, params=None):
        self.requests.append({"url": url, "headers": headers or {}, "params": params or {}})
        return _RequestContext(self.routes.get(url, FakeResponse(status=404)))


@pytest.fixture
def settings():
    return load_settings(github_token=None)
