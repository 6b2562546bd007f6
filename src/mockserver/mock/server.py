"""
Mock Server

FastAPI-based HTTP mock server that serves configured endpoint responses.

Features:
- Exact method + path dispatch to configured endpoints
- Static, weighted and sequenced response strategies
- Per-response delays
- Admin API for metrics and registered endpoints
"""

from __future__ import annotations  # Enable forward references for type hints

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.types import Receive, Scope, Send

from ..config import load_endpoints
from ..rest import Endpoint, EndpointMux, register_handlers


@dataclass
class MockConfig:
    """Configuration for mock server behavior."""

    # Server options
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    access_log: bool = True

    # Admin API
    admin_enabled: bool = True
    admin_prefix: str = "/__admin__"


@dataclass
class MockMetrics:
    """Track mock server metrics."""

    total_requests: int = 0
    matched_requests: int = 0
    unmatched_requests: int = 0
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        uptime_seconds = (datetime.now() - datetime.fromisoformat(self.start_time)).total_seconds()
        return {
            'total_requests': self.total_requests,
            'matched_requests': self.matched_requests,
            'unmatched_requests': self.unmatched_requests,
            'match_rate': round((self.matched_requests / self.total_requests * 100) if self.total_requests > 0 else 0, 2),
            'uptime_seconds': round(uptime_seconds, 2),
            'start_time': self.start_time
        }


class MockServer:
    """
    FastAPI-based mock server for configured endpoints.

    Example:
        # Load endpoints from YAML and start server
        server = MockServer(load_endpoints('config.yaml'))
        server.start(port=8080)

        # With custom config
        config = MockConfig(port=9090, admin_enabled=False)
        server = MockServer(endpoints, config=config)
        server.start()
    """

    def __init__(
        self,
        endpoints: Sequence[Endpoint],
        config: Optional[MockConfig] = None
    ):
        """
        Initialize mock server.

        Registration happens here, so an invalid endpoint set fails before
        any port is bound.

        Args:
            endpoints: Endpoints to serve
            config: Optional MockConfig for server behavior

        Raises:
            ValidationError: If two endpoints share a pattern
        """
        self.config = config or MockConfig()
        self.metrics = MockMetrics()
        self.endpoints = list(endpoints)

        self.logger = logging.getLogger("mockserver.mock")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.mux = EndpointMux()
        register_handlers(self.mux, self.endpoints)
        self.logger.info(f"Registered {len(self.endpoints)} endpoints")

        self.app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="Mock Server",
            description="Mock HTTP server serving configured responses",
            version="1.0.0",
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
            redirect_slashes=False
        )

        # Admin API routes
        if self.config.admin_enabled:
            @app.get(f"{self.config.admin_prefix}/metrics")
            async def get_metrics():
                """Get server metrics."""
                return JSONResponse(content=self.metrics.to_dict())

            @app.get(f"{self.config.admin_prefix}/endpoints")
            async def list_endpoints():
                """List registered endpoints."""
                endpoints_summary = [
                    {
                        'method': e.method or '*',
                        'path': e.path,
                        'strategy': e.resolver.name
                    }
                    for e in self.endpoints
                ]
                return JSONResponse(content={
                    'total': len(endpoints_summary),
                    'endpoints': endpoints_summary
                })

            @app.post(f"{self.config.admin_prefix}/reset")
            async def reset_metrics():
                """Reset metrics."""
                self.metrics = MockMetrics()
                return JSONResponse(content={'status': 'reset'})

        # Requests no admin route claims go to the endpoint mux, whatever the method
        app.router.default = self._mock_request

        return app

    async def _handle_request(self, request: Request) -> Response:
        """
        Dispatch a request to its endpoint and track metrics.

        Args:
            request: FastAPI Request object

        Returns:
            Response produced by the endpoint, or a 404/405 fallback
        """
        self.metrics.total_requests += 1

        if self.mux.match(request.method, request.url.path) is not None:
            self.metrics.matched_requests += 1
        else:
            self.metrics.unmatched_requests += 1

        return await self.mux.dispatch(request)

    async def _mock_request(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI fallback serving mock responses for any method."""
        if scope["type"] != "http":
            await self.app.router.not_found(scope, receive, send)
            return

        response = await self._handle_request(Request(scope, receive))
        await response(scope, receive, send)

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        access_log: Optional[bool] = None
    ):
        """
        Start the mock server (blocking).

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
            access_log: Enable access logging (overrides config)
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        print(f"🚀 Mock Server starting...")
        print(f"   Host: {actual_host}:{actual_port}")
        print(f"   Endpoints: {len(self.endpoints)}")

        if self.config.admin_enabled:
            print(f"   Admin API: http://{actual_host}:{actual_port}{self.config.admin_prefix}/metrics")

        print()

        self.logger.info(f"Starting server on {actual_host}:{actual_port}")
        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=self.config.access_log if access_log is None else access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app

    @property
    def patterns(self) -> List[str]:
        """Registered endpoint patterns."""
        return self.mux.patterns


def create_mock_server(
    config_file: str,
    host: str = "0.0.0.0",
    port: int = 8080,
    log_level: str = "info",
    admin_enabled: bool = True,
    access_log: bool = True
) -> MockServer:
    """
    Convenience function to load a config file and create a mock server.

    Args:
        config_file: Path to YAML endpoint config
        host: Host to bind to
        port: Port to bind to
        log_level: Log level (debug, info, warning, error)
        admin_enabled: Expose the admin API
        access_log: Enable uvicorn access logging

    Returns:
        Configured MockServer instance

    Raises:
        ConfigError: If the config file cannot be read
        ValidationError: If an endpoint is invalid

    Example:
        server = create_mock_server('config.yaml', port=8080)
        server.start()
    """
    config = MockConfig(
        host=host,
        port=port,
        log_level=log_level,
        admin_enabled=admin_enabled,
        access_log=access_log
    )

    return MockServer(load_endpoints(config_file), config=config)
