"""Configuration helpers for the OpenVidu client."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_TIMEOUT = 10.0


@dataclass
class OpenViduConfig:
    url: str
    secret: str
    timeout: float = DEFAULT_TIMEOUT
    verify_tls: bool = True

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def load_config() -> OpenViduConfig:
    """Load configuration from environment variables."""
    return OpenViduConfig(
        url=os.environ["OPENVIDU_URL"],
        secret=os.environ["OPENVIDU_SECRET"],
        timeout=float(os.getenv("OPENVIDU_TIMEOUT", str(DEFAULT_TIMEOUT))),
        verify_tls=_env_flag("OPENVIDU_VERIFY_TLS", True),
    )
