"""Shared test fixtures for the commit-watch utilities."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest

from src.ipranges.fetchers import IPRangeFetcher

# Fixed epoch so window arithmetic in tests is exact
BASE_TIME = 1_700_000_000.0

GITHUB_URL = "https://github.test/meta"
ATLASSIAN_URL = "https://atlassian.test/ranges"


@pytest.fixture
def clock() -> Iterator[MagicMock]:
    """Freeze the RecentCommits clock at BASE_TIME.

    Move time by setting ``clock.monotonic.return_value``.
    """
    with patch("src.commits.recent.time") as mock_time:
        mock_time.monotonic.return_value = BASE_TIME
        yield mock_time


# --- Factory functions for test data ---


def json_handler(
    payload: Any, status_code: int = 200,
) -> Callable[[httpx.Request], httpx.Response]:
    """MockTransport handler that answers every request with a JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler


def make_fetcher(handler: Callable[[httpx.Request], httpx.Response]) -> IPRangeFetcher:
    """Factory for IPRangeFetcher backed by an in-process mock transport."""
    return IPRangeFetcher(
        github_meta_url=GITHUB_URL,
        atlassian_ranges_url=ATLASSIAN_URL,
        transport=httpx.MockTransport(handler),
    )
