"""
Settings Module for Honeypot Sensor

Configuration management using Pydantic Settings. Values are read once
from the process environment (and an optional .env file) at startup.

Required:
    WEBHOOK_URL       destination for every notification

Optional:
    HOST_NAME         sensor identity (defaults to the OS hostname)
    HONEYPOT_*        tuning knobs, see the Settings fields below
"""

from __future__ import annotations

import socket
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AnyHttpUrl, Field, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from config.constants import MONITORED_PORTS, Defaults, LogLevel
from exceptions.base import ConfigurationError


_HTTP_URL = TypeAdapter(AnyHttpUrl)


class Settings(BaseSettings):
    """
    Main Settings Class

    WEBHOOK_URL and HOST_NAME are read without a prefix so that existing
    deployments keep working; everything else lives under HONEYPOT_.
    """

    model_config = SettingsConfigDict(
        env_prefix="HONEYPOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Webhook
    webhook_url: str = Field(
        validation_alias="WEBHOOK_URL",
        description="Endpoint that receives every notification"
    )
    webhook_timeout: float = Field(
        default=Defaults.WEBHOOK_TIMEOUT,
        gt=0,
        le=300,
        description="Per-request timeout for webhook deliveries in seconds"
    )

    # Sensor identity
    host_name: str = Field(
        default_factory=socket.gethostname,
        validation_alias="HOST_NAME",
        description="Identity of this sensor instance"
    )

    # Listening
    ports: Annotated[List[int], NoDecode] = Field(
        default_factory=lambda: list(MONITORED_PORTS),
        description="Ports to listen on, in order"
    )
    bind_host: str = Field(
        default=Defaults.BIND_HOST,
        description="Address every listener binds to"
    )

    # Heartbeat
    heartbeat_interval: float = Field(
        default=Defaults.HEARTBEAT_INTERVAL,
        gt=0,
        description="Seconds between 'still alive' health checks"
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum level for emitted log lines"
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Optional rotating log file"
    )
    log_json: bool = Field(
        default=False,
        description="Serialize the file log as JSON"
    )

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        """Require an http(s) URL but keep the value exactly as configured."""
        v = v.strip()
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError as e:
            raise ValueError(e.errors()[0]["msg"]) from None
        return v

    @field_validator("host_name", mode="before")
    @classmethod
    def default_host_name(cls, v: Any) -> str:
        """Fall back to the OS hostname when HOST_NAME is blank."""
        if v is None or not str(v).strip():
            return socket.gethostname()
        return str(v).strip()

    @field_validator("ports", mode="before")
    @classmethod
    def parse_ports(cls, v: Any) -> List[int]:
        """Parse a port list from a comma-separated string or sequence."""
        if isinstance(v, str):
            return [int(x.strip()) for x in v.split(",") if x.strip()]

        if isinstance(v, (list, set, tuple)):
            return [int(x) for x in v]

        return v

    @field_validator("ports")
    @classmethod
    def validate_ports(cls, v: List[int]) -> List[int]:
        if not v:
            raise ValueError("at least one port must be configured")

        for port in v:
            if not 0 <= port <= 65535:
                raise ValueError(f"port out of range: {port}")

        # Keep listening order, drop duplicates
        return list(dict.fromkeys(v))

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def webhook(self) -> str:
        """Webhook URL exactly as configured (not normalised)."""
        return self.webhook_url

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a loggable dictionary."""
        data = self.model_dump(mode="json")
        data["ports"] = list(self.ports)
        return data


def load_settings(**overrides: Any) -> Settings:
    """
    Build a Settings instance from the environment.

    Raises:
        ConfigurationError: if a required value is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        errors = e.errors()
        fields = [".".join(str(part) for part in err["loc"]) for err in errors]
        webhook_errors = [
            err for err in errors
            if err["loc"] and str(err["loc"][0]).lower() == "webhook_url"
        ]

        if webhook_errors and webhook_errors[0]["type"] == "missing":
            config_key = "WEBHOOK_URL"
            message = "WEBHOOK_URL environment variable is required"
        elif webhook_errors:
            config_key = "WEBHOOK_URL"
            message = f"WEBHOOK_URL is not a valid http(s) URL: {webhook_errors[0]['msg']}"
        else:
            config_key = fields[0] if fields else None
            message = f"Invalid configuration: {e.error_count()} error(s) in {', '.join(fields)}"

        raise ConfigurationError(
            message,
            config_key=config_key,
            cause=e,
            details={"fields": fields},
        ) from e

