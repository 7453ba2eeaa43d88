"""Server address validation for manual entry and subnet derivation."""

from __future__ import annotations

import ipaddress

from connectivity.middleware.error_handler import InvalidServerAddressError


def is_ipv4_address(value: str) -> bool:
    """True for a strict dotted-quad IPv4 string such as ``192.168.1.20``.

    Leading zeros are rejected by ``ipaddress`` so ``010.0.0.1`` is invalid.
    """
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def validate_server_ip(value: str) -> str:
    """Return the stripped address, or raise ``InvalidServerAddressError``."""
    candidate = value.strip()
    if not candidate:
        raise InvalidServerAddressError("Please enter an IP address")
    if not is_ipv4_address(candidate):
        raise InvalidServerAddressError(value=value)
    return candidate
