"""Shared fixtures: temporary cache files and a stub HTTP client."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import structlog

from photo_places.core.config import Settings


class StubAsyncClient:
    """Replays queued responses (or raises queued exceptions) for ``get``."""

    def __init__(self, responses: list[Any] | None = None, **kwargs: Any) -> None:
        self.responses = list(responses or [])
        self.requests: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    async def __aenter__(self) -> StubAsyncClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.closed = True
        return False

    async def aclose(self) -> None:
        self.closed = True

    async def get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        self.requests.append((url, dict(params or {})))
        if not self.responses:
            msg = f"Unexpected request for {url}"
            raise AssertionError(msg)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True, scope="session")
def _structlog_to_stdlib() -> None:
    # Route events through stdlib logging so they never land in captured stdout.
    structlog.configure(
        processors=[structlog.processors.add_log_level, structlog.processors.JSONRenderer()],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def features_response(*names: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={"type": "FeatureCollection", "features": [{"place_name": n} for n in names]},
    )


@pytest.fixture
def stub_client() -> Callable[..., StubAsyncClient]:
    def _make(*responses: Any) -> StubAsyncClient:
        return StubAsyncClient(list(responses))

    return _make


@pytest.fixture
def place_response() -> Callable[..., httpx.Response]:
    return features_response


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "location-names.json"


@pytest.fixture
def settings(cache_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        mapbox_access_token="test-token",
        geocode_cache_path=cache_path,
        geocode_persistence="deferred",
    )
