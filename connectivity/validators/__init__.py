"""Validators for manually supplied server addresses."""

from connectivity.validators.address import is_ipv4_address, validate_server_ip

__all__ = ["is_ipv4_address", "validate_server_ip"]
