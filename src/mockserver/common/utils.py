"""
Mock Server Common Utilities

Duration parsing and listen address helpers.
"""

import os
import re
from typing import Optional, Tuple, Union

from ..rest.errors import ValidationError


DEFAULT_ADDR = ":8080"
DEFAULT_HOST = "0.0.0.0"

_DURATION_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'μs': 1e-6,
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}

_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)')


def parse_duration(value: Union[str, int, float, None]) -> float:
    """
    Parse a duration such as "150ms", "1.5s" or "1h30m" into seconds.

    Units: ns, us (or µs), ms, s, m, h. A bare "0" is accepted; any other
    number needs a unit. Empty values mean no delay.

    Args:
        value: Duration string

    Returns:
        Duration in seconds (may be negative if prefixed with "-")

    Raises:
        ValidationError: If the string is not a valid duration

    Example:
        parse_duration("250ms")  # 0.25
    """
    if value is None or value == "":
        return 0.0
    if not isinstance(value, str):
        # YAML turns a bare 0 into an int
        if value == 0:
            return 0.0
        raise ValidationError(f"invalid duration {value!r}: missing unit")

    text = value.strip()
    sign = 1.0
    if text[:1] in ('-', '+'):
        sign = -1.0 if text[0] == '-' else 1.0
        text = text[1:]

    if text == '0':
        return 0.0

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if not match:
            raise ValidationError(f"invalid duration {value!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    if pos == 0:
        raise ValidationError(f"invalid duration {value!r}")

    return sign * total


def parse_listen_addr(addr: str) -> Tuple[str, int]:
    """
    Split a "host:port" listen address.

    An empty host (":8080") means all interfaces.

    Raises:
        ValidationError: If the port is missing or not a number
    """
    host, sep, port = addr.rpartition(':')
    if not sep or not port.isdigit():
        raise ValidationError(f"invalid listen address {addr!r}: expected host:port")
    return host or DEFAULT_HOST, int(port)


def get_listen_addr_from_env() -> Optional[str]:
    """
    Read the listen address from the ADDR environment variable.

    Returns:
        The configured address, or None if ADDR is unset or empty
    """
    return os.environ.get('ADDR') or None
