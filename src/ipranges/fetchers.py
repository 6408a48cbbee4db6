"""Published IP ranges for GitHub webhooks and Bitbucket Cloud.

GitHub:    https://docs.github.com/en/authentication/keeping-your-account-and-data-secure/about-githubs-ip-addresses
Atlassian: https://support.atlassian.com/organization-administration/docs/ip-addresses-and-domains-for-atlassian-cloud-products/

No retry or caching: every call hits the network, and any failure is
raised to the caller as IPRangeFetchError.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.ipranges.models import AtlassianIpRanges, GitHubMeta

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

_DEFAULT_GITHUB_META_URL = "https://api.github.com/meta"
_DEFAULT_ATLASSIAN_RANGES_URL = "https://ip-ranges.atlassian.com"
_DEFAULT_TIMEOUT_SECONDS = 30.0

_OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])"
_IPV4_RE = re.compile(rf"\A{_OCTET}(?:\.{_OCTET}){{3}}\Z")


class IPRangeFetchError(Exception):
    """Raised when a provider's IP ranges cannot be fetched or parsed."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"Failed to fetch {provider} IP ranges: {reason}")


def is_ipv4_address(value: str) -> bool:
    """Return True if value is a dotted-quad IPv4 address (no prefix length)."""
    return _IPV4_RE.match(value) is not None


class IPRangeFetcher:
    """Fetches provider IP ranges over HTTPS with TLS verification."""

    def __init__(
        self,
        github_meta_url: str = _DEFAULT_GITHUB_META_URL,
        atlassian_ranges_url: str = _DEFAULT_ATLASSIAN_RANGES_URL,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._github_meta_url = github_meta_url
        self._atlassian_ranges_url = atlassian_ranges_url
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls, timeout: float | None = None) -> IPRangeFetcher:
        """Create IPRangeFetcher with configuration from environment variables.

        An explicit timeout takes precedence over IP_RANGES_TIMEOUT_SECONDS.
        """
        if timeout is None:
            raw = os.environ.get("IP_RANGES_TIMEOUT_SECONDS", str(_DEFAULT_TIMEOUT_SECONDS))
            try:
                timeout = float(raw)
            except ValueError as exc:
                raise ValueError(
                    f"IP_RANGES_TIMEOUT_SECONDS must be a number, got {raw!r}",
                ) from exc
        return cls(
            github_meta_url=os.environ.get("GITHUB_META_URL", _DEFAULT_GITHUB_META_URL),
            atlassian_ranges_url=os.environ.get(
                "ATLASSIAN_IP_RANGES_URL", _DEFAULT_ATLASSIAN_RANGES_URL,
            ),
            timeout=timeout,
        )

    def github_hook_ranges(self) -> list[str]:
        """Return the CIDR ranges GitHub sends webhooks from."""
        meta = self._get("github", self._github_meta_url, GitHubMeta)
        logger.info("Fetched %d GitHub hook range(s)", len(meta.hooks))
        return list(meta.hooks)

    def bitbucket_ip_ranges(self) -> list[str]:
        """Return the IPv4 CIDR ranges published for Atlassian cloud products."""
        ranges = self._get("bitbucket", self._atlassian_ranges_url, AtlassianIpRanges)
        selected: list[str] = []
        for item in ranges.items:
            if not (isinstance(item.network, str) and is_ipv4_address(item.network)):
                continue
            if not isinstance(item.cidr, str):
                logger.warning("IPv4 item %s has no cidr", item.network)
                raise IPRangeFetchError(
                    "bitbucket", f"item {item.network} has no cidr string",
                )
            selected.append(item.cidr)
        logger.info(
            "Fetched %d Bitbucket IPv4 range(s) out of %d item(s)",
            len(selected), len(ranges.items),
        )
        return selected

    def _get(self, provider: str, url: str, model: type[_M]) -> _M:
        try:
            with httpx.Client(
                verify=True, timeout=self._timeout, transport=self._transport,
            ) as client:
                resp = client.get(url)
                resp.raise_for_status()
                payload: Any = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("%s returned HTTP %d", url, exc.response.status_code)
            raise IPRangeFetchError(
                provider, f"HTTP {exc.response.status_code} from {url}",
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise IPRangeFetchError(provider, f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("Invalid JSON from %s: %s", url, exc)
            raise IPRangeFetchError(provider, f"invalid JSON from {url}") from exc

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Unexpected payload shape from %s: %s", url, exc)
            raise IPRangeFetchError(provider, f"unexpected payload from {url}") from exc


def fetch_github_hook_ranges() -> list[str]:
    """Fetch GitHub's webhook source ranges using environment configuration."""
    return IPRangeFetcher.from_env().github_hook_ranges()


def fetch_bitbucket_ip_ranges() -> list[str]:
    """Fetch Atlassian's IPv4 ranges using environment configuration."""
    return IPRangeFetcher.from_env().bitbucket_ip_ranges()
