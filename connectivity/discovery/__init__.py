"""Candidate discovery — URL generation and local network information."""

from connectivity.discovery.candidates import CandidateGenerator, dedupe
from connectivity.discovery.network_info import get_device_ip, has_network_interface

__all__ = [
    "CandidateGenerator",
    "dedupe",
    "get_device_ip",
    "has_network_interface",
]
