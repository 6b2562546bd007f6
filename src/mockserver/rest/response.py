"""
Mock Response

Immutable HTTP response value served by an endpoint.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import ValidationError


DEFAULT_STATUS = 200
MIN_STATUS = 100
MAX_STATUS = 599


@dataclass(frozen=True)
class Response:
    """
    A configured HTTP response.

    Build instances with new_response() so that status and delay are
    validated; the dataclass itself only stores the values.
    """

    status_code: int = DEFAULT_STATUS
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: bytes = b''
    delay: float = 0.0  # seconds

    def __hash__(self):
        return hash((self.status_code, tuple(sorted(self.headers.items())), self.body, self.delay))


def new_response(
    status_code: Optional[int] = None,
    headers: Optional[Mapping[str, str]] = None,
    body: Optional[bytes] = None,
    delay: Optional[float] = None
) -> Response:
    """
    Build a validated Response, defaulting every omitted field.

    Args:
        status_code: HTTP status (100-599). None or 0 means "not set" and
            defaults to 200.
        headers: Header names to values, applied with set semantics
        body: Response body bytes (str is encoded as UTF-8)
        delay: Seconds to wait before writing the response

    Returns:
        Response with all fields populated

    Raises:
        ValidationError: If status is out of range or delay is negative

    Example:
        resp = new_response(status_code=201, body=b'{"id": 1}')
    """
    if not status_code:
        status_code = DEFAULT_STATUS
    elif status_code < MIN_STATUS or status_code > MAX_STATUS:
        raise ValidationError(f"invalid status code: {status_code}")

    if delay is None:
        delay = 0.0
    elif delay < 0:
        raise ValidationError(f"delay cannot be negative: {delay}")

    if isinstance(body, str):
        body = body.encode('utf-8')

    # Copy so later mutation of the caller's dict cannot leak in
    frozen_headers = MappingProxyType(dict(headers or {}))

    return Response(
        status_code=int(status_code),
        headers=frozen_headers,
        body=bytes(body or b''),
        delay=float(delay)
    )
