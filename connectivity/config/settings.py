"""Pydantic Settings for the connectivity layer.

All environment variables use the CONNECTIVITY_ prefix.
Example: CONNECTIVITY_API_HOST=192.168.1.20, CONNECTIVITY_PLATFORM=web
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class ConnectivitySettings(BaseSettings):
    """Endpoint resolution configuration validated from environment variables."""

    # Control API
    port: int = 8002
    log_level: str = "INFO"

    # Candidate sources
    deployed_url: str = "https://slugger-app-group6-qrpk.onrender.com/api"
    api_host: str = "localhost"
    api_port: int = Field(default=5001, ge=1, le=65535)
    api_path: str = "/api"
    server_ip: str | None = None  # Manually entered server address
    device_ip: str | None = None  # Overrides auto-detection for subnet scans
    platform: Literal["native", "web"] = "native"

    # Probe timeouts
    ping_timeout_seconds: float = Field(default=1.5, gt=0)
    health_timeout_seconds: float = Field(default=5.0, gt=0)

    # Network scan
    scan_ports: list[int] = [5000, 3000]  # Tried after api_port
    scan_enabled: bool = False

    # Known LAN hosts / scan octets
    known_hosts_path: str = str(Path(__file__).with_name("known_hosts.yaml"))

    model_config = {"env_prefix": "CONNECTIVITY_"}

    @property
    def configured_url(self) -> str:
        """Base URL built from the configured (or manually entered) host."""
        host = self.server_ip or self.api_host
        return f"http://{host}:{self.api_port}{self.api_path}"

    @property
    def ports_to_try(self) -> list[int]:
        """Configured API port first, then the scan ports, without duplicates."""
        ports = [self.api_port]
        for port in self.scan_ports:
            if port not in ports:
                ports.append(port)
        return ports
