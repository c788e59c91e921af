"""Crawl settings and YAML configuration files.

A configuration file looks like::

    base_urls:
      - https://example.org/
      - https://example.com/employment
    interval: 1       # seconds between pages
    max_urls: 1000    # queue positions visited per crawl
    timeout: 30       # per-request network timeout
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from jobcrawler.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
REQUEST_INTERVAL = 1
MAX_URLS = 1000
REQUEST_TIMEOUT = 30

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


class SpiderConfig(BaseModel):
    """Engine tuning, fixed when the spider is built."""

    model_config = {"frozen": True}

    interval: float = Field(default=REQUEST_INTERVAL, ge=0, allow_inf_nan=False, strict=True)
    max_urls: int = Field(default=MAX_URLS, ge=0, strict=True)

    @classmethod
    def build(cls, **values: Any) -> SpiderConfig:
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid crawl settings: {exc}") from exc


class CrawlConfig(SpiderConfig):
    """Full driver configuration loaded from YAML."""

    base_urls: list[str]
    timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)
    user_agent: str | None = None

    @field_validator("base_urls")
    @classmethod
    def _require_urls(cls, v: list[str]) -> list[str]:
        urls = [u.strip() for u in v if u and u.strip()]
        if not urls:
            raise ValueError("base_urls must contain at least one URL")
        return urls

    def spider_options(self) -> dict[str, Any]:
        return {"interval": self.interval, "max_urls": self.max_urls}


def load_config(path: str | Path) -> CrawlConfig:
    """Read and validate the YAML configuration at *path*."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")

    try:
        return CrawlConfig(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"{path}: {exc}") from exc
