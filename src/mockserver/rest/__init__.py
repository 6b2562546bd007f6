"""
Mock Server REST Module

Response resolution engine and HTTP dispatch.

This module provides:
- Immutable responses with status, headers, body and delay
- Static, weighted and sequenced response resolvers
- Endpoint bindings and the exact-match dispatcher
"""

from .errors import MockServerError, ValidationError, InvariantViolationError
from .response import Response, new_response
from .resolvers import (
    ResponseResolver,
    StaticResponse,
    WeightedResponse,
    WeightedResponseEntry,
    SequencedResponse,
    NumberGenerator,
    RandomNumberGenerator,
    SEQUENCE_LOOP,
    SEQUENCE_REPEAT_LAST,
)
from .endpoint import Endpoint
from .dispatcher import EndpointMux, register_handlers

__all__ = [
    # Errors
    'MockServerError',
    'ValidationError',
    'InvariantViolationError',

    # Responses
    'Response',
    'new_response',

    # Resolvers
    'ResponseResolver',
    'StaticResponse',
    'WeightedResponse',
    'WeightedResponseEntry',
    'SequencedResponse',
    'NumberGenerator',
    'RandomNumberGenerator',
    'SEQUENCE_LOOP',
    'SEQUENCE_REPEAT_LAST',

    # Dispatch
    'Endpoint',
    'EndpointMux',
    'register_handlers',
]
