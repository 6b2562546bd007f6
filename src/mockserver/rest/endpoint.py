"""
Mock Endpoint

Binding between a request path/method and the resolver that answers it.
"""

from dataclasses import dataclass

from .resolvers import ResponseResolver
from .response import Response


@dataclass(frozen=True)
class Endpoint:
    """
    A configured endpoint.

    An empty method matches requests with any method.
    """

    path: str
    method: str
    resolver: ResponseResolver

    @property
    def pattern(self) -> str:
        """Registration pattern: "METHOD /path", or "/path" for any method."""
        if self.method:
            return f"{self.method} {self.path}"
        return self.path

    def response(self) -> Response:
        """Yield the next response to return when the endpoint is hit."""
        return self.resolver.next_response()
