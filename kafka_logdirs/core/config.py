# kafka_logdirs/core/config.py
import json
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central settings loaded from environment variables (and .env).

    Notes
    -----
    - Every variable carries the ``KAFKA_LOGDIRS_`` prefix, e.g.
        KAFKA_LOGDIRS_BOOTSTRAP_SERVERS=broker-1:9092,broker-2:9092
    - `kafka_api_version` is a dotted string ("2.4.0"); leave unset to let
      the client ask the broker.
    - `cors_allow_origins` accepts JSON array or comma-separated string.
    - Command-line flags override whatever is loaded here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KAFKA_LOGDIRS_",
        extra="ignore",
    )

    # ---------- Kafka client/admin ----------
    bootstrap_servers: str = Field("localhost:9092")
    client_id: str = "kafka-logdirs"
    kafka_api_version: str | None = None

    # Client timeouts (ms)
    request_timeout_ms: int = 30_000
    api_version_auto_timeout_ms: int = 10_000

    # ---------- Security (set when using SASL/SSL) ----------
    security_protocol: str = "PLAINTEXT"   # e.g. "SASL_SSL", "SSL"
    sasl_mechanism: str | None = None
    sasl_plain_username: str | None = None
    sasl_plain_password: str | None = None
    ssl_cafile: str | None = None

    # ---------- CLI ----------
    log_level: str = "WARNING"
    output_format: Literal["text", "json"] = "text"

    # ---------- CORS ----------
    cors_allow_origins: list[str] | None = None

    @field_validator("cors_allow_origins", mode="before")
    def _parse_cors_origins(cls, v):
        """Accept JSON array or comma-separated string."""
        if v is None:
            return None
        if isinstance(v, str):
            try:
                parsed = json.loads(v)  # JSON array
                if isinstance(parsed, list):
                    return [str(s).strip() for s in parsed if str(s).strip()]
            except ValueError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("kafka_api_version")
    def _check_api_version(cls, v):
        if v is None:
            return None
        parts = v.strip().split(".")
        if not all(p.isdigit() for p in parts):
            raise ValueError(f"kafka_api_version must look like '2.4.0', got {v!r}")
        return v.strip()

    def api_version_tuple(self) -> tuple[int, ...] | None:
        """Return `kafka_api_version` in the tuple form kafka-python expects."""
        if not self.kafka_api_version:
            return None
        return tuple(int(p) for p in self.kafka_api_version.split("."))


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
