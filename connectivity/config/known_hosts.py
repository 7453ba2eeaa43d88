"""Known LAN host models and YAML loader.

The fallback host list (routers, loopback, emulator aliases) and the curated
last-octet list used for subnet scans live in a YAML file so deployments can
tune them per network without code changes.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

EMULATOR_HOST_ALIAS = "10.0.2.2"


class KnownHosts(BaseModel):
    """Well-known addresses to try during local discovery."""

    hosts: list[str] = Field(default_factory=list)
    scan_octets: list[int] = Field(default_factory=list)

    @field_validator("scan_octets")
    @classmethod
    def _octets_in_range(cls, value: list[int]) -> list[int]:
        for octet in value:
            if not 1 <= octet <= 254:
                raise ValueError(f"scan octet out of range: {octet}")
        return value


DEFAULT_KNOWN_HOSTS = KnownHosts(
    hosts=[
        "192.168.1.1",
        "192.168.0.1",
        EMULATOR_HOST_ALIAS,
        "localhost",
        "127.0.0.1",
        "172.20.10.1",
    ],
    scan_octets=[1, 2, 10, 50, 100, 101, 102, 150, 200, 250, 252, 254],
)


def load_known_hosts(yaml_path: str) -> KnownHosts:
    """Parse the known hosts YAML file.

    Missing, malformed or invalid files fall back to ``DEFAULT_KNOWN_HOSTS``.
    A file that only sets one of the two lists keeps the default for the other.
    """
    path = Path(yaml_path)

    if not path.exists():
        logger.warning("Known hosts file not found at %s — using built-in defaults", yaml_path)
        return DEFAULT_KNOWN_HOSTS

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logger.error("Failed to parse known hosts YAML at %s: %s", yaml_path, exc)
        return DEFAULT_KNOWN_HOSTS

    if not isinstance(raw, dict):
        logger.warning("Known hosts YAML is not a mapping — using built-in defaults")
        return DEFAULT_KNOWN_HOSTS

    merged = {
        "hosts": raw.get("hosts") or DEFAULT_KNOWN_HOSTS.hosts,
        "scan_octets": raw.get("scan_octets") or DEFAULT_KNOWN_HOSTS.scan_octets,
    }
    try:
        return KnownHosts.model_validate(merged)
    except Exception as exc:
        logger.error("Invalid known hosts config at %s: %s — using built-in defaults", yaml_path, exc)
        return DEFAULT_KNOWN_HOSTS
