"""
Mock Server

Configurable fake HTTP backend for integration testing.

Endpoints are declared in YAML and answer with static, weighted-random or
sequenced responses.
"""

from .rest import (
    Endpoint,
    InvariantViolationError,
    MockServerError,
    Response,
    SequencedResponse,
    StaticResponse,
    ValidationError,
    WeightedResponse,
    WeightedResponseEntry,
    new_response,
)
from .config import Config, ConfigError, load_endpoints
from .mock import MockServer, MockConfig, create_mock_server

__all__ = [
    'Endpoint',
    'InvariantViolationError',
    'MockServerError',
    'Response',
    'SequencedResponse',
    'StaticResponse',
    'ValidationError',
    'WeightedResponse',
    'WeightedResponseEntry',
    'new_response',
    'Config',
    'ConfigError',
    'load_endpoints',
    'MockServer',
    'MockConfig',
    'create_mock_server',
]

__version__ = '1.0.0'
