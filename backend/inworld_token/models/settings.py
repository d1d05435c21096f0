"""Runtime configuration for the Inworld token service."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

DEFAULT_HOST = "api.inworld.ai"
DEFAULT_ENGINE_HOST = "api-engine.inworld.ai"
DEFAULT_WORKSPACE = "workspaces/default-workspace"
DEFAULT_HTTP_TIMEOUT = 10.0


def _env_float(name: str, default: str) -> float:
    value = os.getenv(name, default)
    try:
        return float(value)
    except ValueError:
        return float(default)


@dataclass(slots=True)
class Settings:
    """Runtime configuration sourced from environment variables."""

    inworld_key: str = field(default_factory=lambda: os.getenv("INWORLD_KEY", ""))
    inworld_secret: str = field(
        default_factory=lambda: os.getenv("INWORLD_SECRET", ""), repr=False
    )
    inworld_host: str = field(default_factory=lambda: os.getenv("INWORLD_HOST", DEFAULT_HOST))
    inworld_engine_host: str = field(
        default_factory=lambda: os.getenv("INWORLD_ENGINE_HOST", DEFAULT_ENGINE_HOST)
    )
    inworld_workspace: str = field(
        default_factory=lambda: os.getenv("INWORLD_WORKSPACE", DEFAULT_WORKSPACE)
    )
    http_timeout: float = field(
        default_factory=lambda: _env_float("INWORLD_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cors_allow_origins: str = field(
        default_factory=lambda: os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000")
    )

    def __post_init__(self) -> None:
        # Empty variables fall back to defaults, matching `VAR || default`.
        self.inworld_host = self.inworld_host.strip() or DEFAULT_HOST
        self.inworld_engine_host = self.inworld_engine_host.strip() or DEFAULT_ENGINE_HOST
        self.inworld_workspace = self.inworld_workspace.strip() or DEFAULT_WORKSPACE
        if not math.isfinite(self.http_timeout) or self.http_timeout <= 0:
            self.http_timeout = DEFAULT_HTTP_TIMEOUT
        self.log_level = self.log_level.upper()

    @property
    def has_credentials(self) -> bool:
        return bool(self.inworld_key and self.inworld_secret)

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
