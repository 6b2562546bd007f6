"""
Mock Server Configuration Module

Loads YAML endpoint definitions and translates them into endpoints.
"""

from .config import (
    Config,
    ConfigError,
    EndpointConfig,
    ResponseConfig,
    ResponseBodyConfig,
    ResponseStrategyConfig,
    SequenceConfig,
    SequenceEntryConfig,
    WeightedResponseConfig,
    DEFAULT_END_BEHAVIOR,
    load_endpoints,
)

__all__ = [
    'Config',
    'ConfigError',
    'EndpointConfig',
    'ResponseConfig',
    'ResponseBodyConfig',
    'ResponseStrategyConfig',
    'SequenceConfig',
    'SequenceEntryConfig',
    'WeightedResponseConfig',
    'DEFAULT_END_BEHAVIOR',
    'load_endpoints',
]
