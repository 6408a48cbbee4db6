"""Pydantic models for the provider IP range payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class GitHubMeta(BaseModel):
    """Subset of ``GET https://api.github.com/meta`` used here."""

    model_config = ConfigDict(frozen=True)

    hooks: list[str]


class AtlassianIpRange(BaseModel):
    """One published range. IPv6 and malformed entries are filtered by the caller."""

    model_config = ConfigDict(frozen=True)

    network: Any = None
    cidr: Any = None


class AtlassianIpRanges(BaseModel):
    """Payload of ``GET https://ip-ranges.atlassian.com``."""

    model_config = ConfigDict(frozen=True)

    items: list[AtlassianIpRange]
