# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAX_BODY_BYTES = 256 * 1024


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_flag(name: str, default: str = "0") -> bool:
    return _env(name, default).lower() in {"1", "true", "yes"}


def _env_timeout() -> Optional[float]:
    raw = _env("KORA_TIMEOUT_S")
    return float(raw) if raw else None


class FacilitatorConfig(BaseModel):
    """Process-wide settings, read once at startup.

    Every field defaults from the environment, so ``FacilitatorConfig()`` is
    the production constructor and tests pass explicit values instead.
    """

    model_config = ConfigDict(frozen=True)

    # Kora RPC (private) base URL, e.g. http://kora-rpc:8080
    kora_rpc_url: str = Field(default_factory=lambda: _env("KORA_RPC_URL"))
    kora_api_key: str = Field(default_factory=lambda: _env("KORA_API_KEY"))
    facilitator_token: str = Field(default_factory=lambda: _env("FACILITATOR_TOKEN"))

    # Advertised on /supported
    network: str = Field(default_factory=lambda: _env("X402_NETWORK", "solana-devnet"))
    scheme: str = Field(default_factory=lambda: _env("X402_SCHEME", "exact"))
    version: str = Field(default_factory=lambda: _env("FACILITATOR_VERSION", "0.1.0"))

    host: str = Field(default_factory=lambda: _env("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(_env("PORT", "3000")))
    # None keeps Kora calls unbounded
    kora_timeout_s: Optional[float] = Field(default_factory=_env_timeout)
    strict_startup: bool = Field(default_factory=lambda: _env_flag("FACILITATOR_STRICT_STARTUP"))
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    log_level: str = Field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())

    @field_validator("kora_rpc_url", "kora_api_key", "facilitator_token", "network", "scheme", "version")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("kora_rpc_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("kora_timeout_s")
    @classmethod
    def _positive_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("kora_timeout_s must be positive")
        return v

    @property
    def auth_enabled(self) -> bool:
        return bool(self.facilitator_token)


def get_facilitator_cfg() -> FacilitatorConfig:
    return FacilitatorConfig()
