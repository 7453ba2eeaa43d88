"""Local network information: the device's own address and link state."""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)

# Routing target for the UDP socket trick; no packet is sent.
_ROUTE_PROBE_ADDR = ("8.8.8.8", 80)


def get_device_ip() -> str | None:
    """Return the IPv4 address of the interface used for outbound traffic.

    ``connect`` on a UDP socket only selects a route, so this works offline
    from the remote host's point of view. Returns None when no route exists.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(_ROUTE_PROBE_ADDR)
            ip = s.getsockname()[0]
    except OSError as exc:
        logger.debug("Could not determine device IP: %s", exc)
        return None

    if ip.startswith("0."):
        return None
    return ip


def has_network_interface() -> bool:
    """True when some non-loopback interface is up.

    A LAN without a default route still counts, so the hostname's own
    address is checked when the routing lookup fails.
    """
    if get_device_ip() is not None:
        return True
    try:
        host_ip = socket.gethostbyname(socket.gethostname())
    except OSError:
        return False
    return not host_ip.startswith("127.")
