"""
Runtime settings for the scaler process, read from the environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from scaler.infra.spanner_client import SpannerAdminClient

STATE_BACKENDS = ("sql", "memory")


@dataclass(frozen=True)
class ScalerSettings:
    state_backend: str = "sql"
    database_url: str = "sqlite:///scaler_state.db"
    spanner_api_base_url: str = SpannerAdminClient.DEFAULT_BASE_URL
    spanner_access_token: Optional[str] = None
    spanner_request_timeout_sec: float = 10.0
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] = os.environ) -> "ScalerSettings":
        settings = cls(
            state_backend=env.get("SCALER_STATE_BACKEND", cls.state_backend).lower(),
            database_url=env.get("SCALER_DATABASE_URL", cls.database_url),
            spanner_api_base_url=env.get("SPANNER_API_BASE_URL", cls.spanner_api_base_url),
            spanner_access_token=env.get("SPANNER_ACCESS_TOKEN") or None,
            spanner_request_timeout_sec=float(env.get("SPANNER_REQUEST_TIMEOUT_SEC", cls.spanner_request_timeout_sec)),
            http_host=env.get("SCALER_HTTP_HOST", cls.http_host),
            http_port=int(env.get("SCALER_HTTP_PORT", cls.http_port)),
            log_level=env.get("SCALER_LOG_LEVEL", cls.log_level).upper(),
        )
        if settings.state_backend not in STATE_BACKENDS:
            raise ValueError(f"SCALER_STATE_BACKEND must be one of {STATE_BACKENDS}, got '{settings.state_backend}'")
        return settings
