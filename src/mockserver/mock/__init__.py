"""
Mock Server Module

FastAPI application and bootstrap for serving configured endpoints.
"""

from .server import MockServer, MockConfig, MockMetrics, create_mock_server

__all__ = [
    'MockServer',
    'MockConfig',
    'MockMetrics',
    'create_mock_server',
]
