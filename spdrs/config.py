# === FILE: spdrs/config.py ===
"""
Loading and validation of the spdrs crawl configuration.
The schema is a pydantic model; files may be YAML or JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from spdrs import __version__


class CrawlerConfig(BaseModel):
    """Settings for one crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: str = Field(..., description="Absolute URL the crawl starts from.")
    workers: int = Field(32, ge=1, description="Number of concurrent fetch workers.")
    timeout: Optional[float] = Field(None, gt=0, description="Per-request timeout in seconds, none by default.")
    user_agent: str = Field(f"spdrs/{__version__}", min_length=1, description="User-Agent header.")
    channel_capacity: int = Field(0, ge=0, description="Result channel bound, 0 for unbounded.")

    @field_validator("seed_url")
    @classmethod
    def _check_seed_url(cls, v: str) -> str:
        try:
            parsed = urlsplit(v)
            parsed.port
        except ValueError as exc:
            raise ValueError(f"invalid seed URL {v!r}: {exc}") from exc
        if not parsed.scheme:
            raise ValueError(f"relative URL without a base: {v!r}")
        if not parsed.hostname:
            raise ValueError("Missing host")
        return v


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlerConfig:
    """
    Build a validated CrawlerConfig from an optional YAML/JSON file.

    Keyword overrides that are not None take precedence over file values.
    Raises FileNotFoundError for a missing file and pydantic.ValidationError
    for invalid settings.
    """
    data: dict[str, Any] = {}
    if path is not None:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)
