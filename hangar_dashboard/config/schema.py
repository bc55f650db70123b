"""Pydantic configuration models for Hangar Dashboard.

Example ``hangar.yaml``::

    client:
      server_url: https://hangar.garageisep.com
      token: ${HANGAR_TOKEN}
      language: fr
    links:
      app_domain: hangar.garageisep.com
    polling:
      status_interval: 5
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from hangar_dashboard.constants import (
    DEFAULT_APP_DOMAIN,
    DEFAULT_GITHUB_APP_NAME,
    DEFAULT_LANGUAGE,
    DEFAULT_PHPMYADMIN_URL,
    DEFAULT_SERVER_URL,
    METRICS_POLL_INTERVAL,
    RELOAD_DELAY,
    STATUS_POLL_INTERVAL,
)


class ClientConfig(BaseModel):
    """Connection settings for the Hangar API."""

    server_url: str = Field(default=DEFAULT_SERVER_URL, min_length=1)
    token: Optional[str] = Field(default=None, description="Bearer token (supports ${ENV_VAR}).")
    language: Literal["en", "fr"] = DEFAULT_LANGUAGE

    @field_validator("server_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")


class IdentityConfig(BaseModel):
    """Optional override of the caller identity reported by ``auth/me``."""

    login: Optional[str] = None
    is_admin: Optional[bool] = None


class LinksConfig(BaseModel):
    """External URLs rendered by the dashboard."""

    app_domain: str = DEFAULT_APP_DOMAIN
    phpmyadmin_url: str = DEFAULT_PHPMYADMIN_URL
    github_app_name: str = DEFAULT_GITHUB_APP_NAME


class PollingConfig(BaseModel):
    """Polling periods and the post-control reload delay, in seconds."""

    status_interval: float = Field(default=STATUS_POLL_INTERVAL, gt=0)
    metrics_interval: float = Field(default=METRICS_POLL_INTERVAL, gt=0)
    reload_delay: float = Field(default=RELOAD_DELAY, ge=0)


class HangarConfig(BaseModel):
    """Top-level configuration file model."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    links: LinksConfig = Field(default_factory=LinksConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
