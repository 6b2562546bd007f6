"""
Endpoint Dispatcher

Registers one request handler per endpoint and routes incoming requests
to them by exact method + path.

Features:
- "METHOD /path" and "/path" (any method) registration patterns
- Per-response delay, abandoned early if the client disconnects
- 404 for unknown paths, 405 with Allow header for known paths
- Body write failures logged, never propagated
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response as HTTPResponse
from starlette.types import Receive, Scope, Send

from .endpoint import Endpoint
from .errors import ValidationError
from .response import Response


logger = logging.getLogger("mockserver.rest")

Handler = Callable[[Request], Awaitable[HTTPResponse]]

# Left to the transport, which computes them from the body it writes
SKIPPED_HEADERS = {'content-length', 'transfer-encoding', 'connection'}

DISCONNECT_POLL_INTERVAL = 0.1  # seconds


class MockResponse(HTTPResponse):
    """Starlette response that logs write failures instead of raising them."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except OSError as e:
            logger.warning(f"Failed to write response: {e}")


class AbandonedResponse(HTTPResponse):
    """Placeholder returned once the client is gone; writes nothing."""

    def __init__(self):
        super().__init__(status_code=499)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        return None


def build_http_response(response: Response) -> MockResponse:
    """
    Convert a mock Response into a Starlette response.

    Headers use set semantics: when two configured names differ only in
    case, the last one wins.

    Args:
        response: Resolved mock response

    Returns:
        MockResponse carrying status, headers and body
    """
    headers: Dict[str, Tuple[str, str]] = {}
    for name, value in response.headers.items():
        if name.lower() in SKIPPED_HEADERS:
            continue
        headers[name.lower()] = (name, value)

    return MockResponse(
        content=response.body,
        status_code=response.status_code,
        headers={name: value for name, value in headers.values()}
    )


async def wait_for_delay(
    request: Request,
    delay: float,
    poll_interval: float = DISCONNECT_POLL_INTERVAL
) -> bool:
    """
    Sleep for delay seconds unless the client disconnects first.

    Args:
        request: Incoming request, polled for disconnects
        delay: Seconds to wait
        poll_interval: Maximum time between disconnect checks

    Returns:
        True if the full delay elapsed, False if the client went away
    """
    remaining = delay
    while remaining > 0:
        if await request.is_disconnected():
            return False
        step = min(remaining, poll_interval)
        await asyncio.sleep(step)
        remaining -= step
    return True


def make_handler(endpoint: Endpoint) -> Handler:
    """Create the request handler serving one endpoint."""

    async def handler(request: Request) -> HTTPResponse:
        client = f"{request.client.host}:{request.client.port}" if request.client else "unknown"
        logger.info(f"Handling request: {request.method} {request.url.path} (addr: {client})")

        # Resolve first: the resolver's lock is released before any waiting
        response = endpoint.response()

        if response.delay > 0:
            if not await wait_for_delay(request, response.delay):
                logger.info(f"Client disconnected during delay: {request.method} {request.url.path}")
                return AbandonedResponse()

        return build_http_response(response)

    return handler


def parse_pattern(pattern: str) -> Tuple[str, str]:
    """
    Split a registration pattern into (method, path).

    Example:
        parse_pattern("GET /users")  # ("GET", "/users")
        parse_pattern("/health")     # ("", "/health")
    """
    method, sep, path = pattern.strip().partition(' ')
    if not sep:
        return "", method
    return method, path.strip()


class EndpointMux:
    """
    Exact-match request multiplexer.

    Handlers are registered once at startup by pattern; lookups afterwards
    are read-only, so no locking is needed.

    Example:
        mux = EndpointMux()
        register_handlers(mux, endpoints)
        response = await mux.dispatch(request)
    """

    def __init__(self):
        self.handlers: Dict[Tuple[str, str], Handler] = {}

    def handle(self, pattern: str, handler: Handler) -> None:
        """
        Register a handler for a pattern.

        Raises:
            ValidationError: If the pattern is malformed or already registered
        """
        method, path = parse_pattern(pattern)
        if not path.startswith('/'):
            raise ValidationError(f"invalid pattern {pattern!r}: path must start with '/'")

        key = (method, path)
        if key in self.handlers:
            raise ValidationError(f"pattern {pattern!r} is already registered")
        self.handlers[key] = handler

    @property
    def patterns(self) -> List[str]:
        """Registered patterns in registration order."""
        return [f"{method} {path}" if method else path for method, path in self.handlers]

    def match(self, method: str, path: str) -> Optional[Handler]:
        """
        Find the handler for a request, or None.

        A method-specific handler wins over an any-method one. HEAD falls
        back to GET.
        """
        for key in ((method, path), ("GET", path) if method == "HEAD" else None, ("", path)):
            if key and key in self.handlers:
                return self.handlers[key]
        return None

    def allowed_methods(self, path: str) -> List[str]:
        """Methods registered for path (empty if the path is unknown)."""
        methods = sorted({method for method, registered in self.handlers if registered == path})
        if "GET" in methods and "HEAD" not in methods:
            methods.append("HEAD")
        return methods

    async def dispatch(self, request: Request) -> HTTPResponse:
        """Route a request to its handler, or answer 404/405."""
        path = request.url.path
        handler = self.match(request.method, path)
        if handler is not None:
            return await handler(request)

        allowed = self.allowed_methods(path)
        if allowed:
            logger.warning(f"Method not allowed: {request.method} {path}")
            return PlainTextResponse(
                "Method Not Allowed\n",
                status_code=405,
                headers={'Allow': ', '.join(allowed)}
            )

        logger.warning(f"No endpoint for {request.method} {path}")
        return PlainTextResponse("404 page not found\n", status_code=404)


def register_handlers(mux, endpoints: Sequence[Endpoint]) -> None:
    """
    Register one handler per endpoint on a mux.

    Args:
        mux: Any object with handle(pattern, handler)
        endpoints: Endpoints to expose
    """
    for endpoint in endpoints:
        logger.info(
            f"Registering endpoint: method={endpoint.method or '*'} path={endpoint.path} "
            f"strategy={endpoint.resolver.name}"
        )
        mux.handle(endpoint.pattern, make_handler(endpoint))
