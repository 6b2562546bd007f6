"""
Mock Server Common Utilities

Shared helpers used across mock server modules.
"""

from .utils import parse_duration, parse_listen_addr, get_listen_addr_from_env

__all__ = [
    'parse_duration',
    'parse_listen_addr',
    'get_listen_addr_from_env',
]
