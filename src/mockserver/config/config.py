"""
Mock Server Configuration

YAML endpoint definitions and their translation into endpoints and
response resolvers.

Example config:
    endpoints:
      - path: /users
        method: GET
        response:
          sequence:
            endBehavior: loop
            responses:
              - count: 2
                response:
                  status: 200
                  body:
                    literal: '{"users": []}'
              - response:
                  status: 503
                  delay: 250ms
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..common.utils import parse_duration
from ..rest import (
    Endpoint,
    MockServerError,
    Response,
    ResponseResolver,
    SequencedResponse,
    StaticResponse,
    ValidationError,
    WeightedResponse,
    WeightedResponseEntry,
    new_response,
    SEQUENCE_REPEAT_LAST,
)


logger = logging.getLogger("mockserver.config")

DEFAULT_END_BEHAVIOR = SEQUENCE_REPEAT_LAST


class ConfigError(MockServerError):
    """Raised when the config file cannot be read or parsed."""


def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


@dataclass
class ResponseBodyConfig:
    """Response body, given inline or read from a file."""

    literal: str = ""
    file_path: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> 'ResponseBodyConfig':
        """Create body config from dictionary."""
        data = _require_mapping(data, "body")
        for key in ('literal', 'filePath'):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise ValidationError(f"body {key} must be a string, got {type(data[key]).__name__}")
        return cls(
            literal=data.get('literal') or "",
            file_path=data.get('filePath') or ""
        )

    def load(self) -> bytes:
        """
        Resolve the body bytes.

        Raises:
            ValidationError: If both sources are set or the file is unreadable
        """
        if self.literal and self.file_path:
            raise ValidationError("response body cannot use both literal and filePath")

        if self.file_path:
            try:
                return Path(self.file_path).read_bytes()
            except OSError as e:
                raise ValidationError(f"read file {self.file_path!r}: {e}") from e

        return self.literal.encode('utf-8')


@dataclass
class ResponseConfig:
    """A single configured response."""

    status: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    body: ResponseBodyConfig = field(default_factory=ResponseBodyConfig)
    delay: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> 'ResponseConfig':
        """Create response config from dictionary."""
        data = _require_mapping(data, "response")
        headers = _require_mapping(data.get('headers'), "headers")
        return cls(
            status=data.get('status') or 0,
            headers={str(k): str(v) for k, v in headers.items()},
            body=ResponseBodyConfig.from_dict(data.get('body')),
            delay=data.get('delay') or ""
        )

    def to_response(self) -> Response:
        """
        Build the validated Response.

        Raises:
            ValidationError: If any field is invalid
        """
        if not isinstance(self.status, int) or isinstance(self.status, bool):
            raise ValidationError(f"invalid status code: {self.status!r}")

        try:
            delay = parse_duration(self.delay)
        except ValidationError as e:
            raise ValidationError(f"invalid response delay {self.delay!r}") from e

        try:
            return new_response(
                status_code=self.status,
                headers=self.headers,
                body=self.body.load(),
                delay=delay
            )
        except ValidationError as e:
            raise ValidationError(f"build response: {e}") from e


@dataclass
class WeightedResponseConfig:
    """A weighted strategy entry."""

    weight: int
    response: ResponseConfig

    @classmethod
    def from_dict(cls, data: Any) -> 'WeightedResponseConfig':
        """Create weighted entry from dictionary."""
        data = _require_mapping(data, "weighted entry")
        return cls(
            weight=data.get('weight', 0),
            response=ResponseConfig.from_dict(data.get('response'))
        )


@dataclass
class SequenceEntryConfig:
    """A sequence strategy entry, repeated count times."""

    response: ResponseConfig
    count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'SequenceEntryConfig':
        """Create sequence entry from dictionary."""
        data = _require_mapping(data, "sequence entry")
        return cls(
            response=ResponseConfig.from_dict(data.get('response')),
            count=data.get('count')
        )


@dataclass
class SequenceConfig:
    """Sequence strategy: responses in order plus end behavior."""

    end_behavior: str = ""
    responses: List[SequenceEntryConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> 'SequenceConfig':
        """Create sequence config from dictionary."""
        data = _require_mapping(data, "sequence")
        if not isinstance(data.get('responses') or [], list):
            raise ValidationError("sequence responses must be a list")
        return cls(
            end_behavior=data.get('endBehavior') or "",
            responses=[SequenceEntryConfig.from_dict(entry) for entry in data.get('responses') or []]
        )


@dataclass
class ResponseStrategyConfig:
    """The response strategy of an endpoint; exactly one field must be set."""

    static: Optional[ResponseConfig] = None
    weighted: Optional[List[WeightedResponseConfig]] = None
    sequence: Optional[SequenceConfig] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'ResponseStrategyConfig':
        """Create strategy config from dictionary."""
        data = _require_mapping(data, "response")

        weighted = None
        if data.get('weighted') is not None:
            if not isinstance(data['weighted'], list):
                raise ValidationError("weighted must be a list")
            weighted = [WeightedResponseConfig.from_dict(entry) for entry in data['weighted']]

        return cls(
            static=ResponseConfig.from_dict(data['static']) if data.get('static') is not None else None,
            weighted=weighted,
            sequence=SequenceConfig.from_dict(data['sequence']) if data.get('sequence') is not None else None
        )


@dataclass
class EndpointConfig:
    """A configured endpoint."""

    path: str
    method: str = ""
    response: ResponseStrategyConfig = field(default_factory=ResponseStrategyConfig)

    @classmethod
    def from_dict(cls, data: Any) -> 'EndpointConfig':
        """Create endpoint config from dictionary."""
        data = _require_mapping(data, "endpoint")
        return cls(
            path=str(data.get('path') or ""),
            method=str(data.get('method') or "").upper(),
            response=ResponseStrategyConfig.from_dict(data.get('response'))
        )


def build_weighted(entries: List[WeightedResponseConfig]) -> WeightedResponse:
    """Translate weighted entries into a WeightedResponse."""
    weighted_entries = []
    for entry in entries:
        try:
            response = entry.response.to_response()
        except ValidationError as e:
            raise ValidationError(f"build weighted response: {e}") from e
        if not isinstance(entry.weight, int) or isinstance(entry.weight, bool):
            raise ValidationError(f"weight must be an integer: {entry.weight!r}")
        weighted_entries.append(WeightedResponseEntry(response=response, weight=entry.weight))

    return WeightedResponse(weighted_entries)


def build_sequence(sequence: SequenceConfig) -> SequencedResponse:
    """Translate a sequence config, expanding entry counts in place."""
    responses: List[Response] = []
    for entry in sequence.responses:
        count = 1
        if entry.count is not None:
            if not isinstance(entry.count, int) or isinstance(entry.count, bool) or entry.count <= 0:
                raise ValidationError(f"sequence response count must be >= 1: {entry.count!r}")
            count = entry.count

        try:
            response = entry.response.to_response()
        except ValidationError as e:
            raise ValidationError(f"build sequence response: {e}") from e

        responses.extend([response] * count)

    return SequencedResponse(sequence.end_behavior or DEFAULT_END_BEHAVIOR, responses)


@dataclass
class Config:
    """
    Full mock server configuration.

    Example:
        config = Config.from_yaml('config.yaml')
        endpoints = config.rest_endpoints()
    """

    endpoints: List[EndpointConfig] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'Config':
        """
        Load configuration from a YAML file.

        Raises:
            ConfigError: If the file is missing or not valid YAML
            ValidationError: If the document has the wrong shape
        """
        try:
            with open(yaml_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"open config file: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"decode config file: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigError(f"decode config file: expected a mapping, got {type(data).__name__}")

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create configuration from dictionary."""
        endpoints = data.get('endpoints') or []
        if not isinstance(endpoints, list):
            raise ValidationError("endpoints must be a list")
        return cls(endpoints=[EndpointConfig.from_dict(entry) for entry in endpoints])

    def rest_endpoints(self) -> List[Endpoint]:
        """
        Translate every endpoint config into an Endpoint.

        Returns:
            Endpoints in config order

        Raises:
            ValidationError: On the first invalid endpoint
        """
        endpoints = []

        for endpoint_cfg in self.endpoints:
            if not endpoint_cfg.path.startswith('/'):
                raise ValidationError(f"endpoint path {endpoint_cfg.path!r} must start with '/'")

            strategy = endpoint_cfg.response
            resolver: Optional[ResponseResolver] = None
            strategy_count = 0

            if strategy.static is not None:
                strategy_count += 1
                try:
                    resolver = StaticResponse(strategy.static.to_response())
                except ValidationError as e:
                    raise ValidationError(f"build response for endpoint {endpoint_cfg.path!r}: {e}") from e

            if strategy.weighted is not None:
                strategy_count += 1
                try:
                    resolver = build_weighted(strategy.weighted)
                except ValidationError as e:
                    raise ValidationError(f"build weighted response for endpoint {endpoint_cfg.path!r}: {e}") from e

            if strategy.sequence is not None:
                strategy_count += 1
                try:
                    resolver = build_sequence(strategy.sequence)
                except ValidationError as e:
                    raise ValidationError(f"build sequenced response for endpoint {endpoint_cfg.path!r}: {e}") from e

            if resolver is None or strategy_count != 1:
                raise ValidationError(
                    f"endpoint {endpoint_cfg.path!r} must have exactly one response strategy "
                    f"but had {strategy_count}"
                )

            endpoints.append(Endpoint(path=endpoint_cfg.path, method=endpoint_cfg.method, resolver=resolver))

        logger.debug(f"Built {len(endpoints)} endpoints from config")
        return endpoints


def load_endpoints(yaml_path: str) -> List[Endpoint]:
    """
    Convenience function: load a config file and build its endpoints.

    Example:
        endpoints = load_endpoints('config.yaml')
    """
    return Config.from_yaml(yaml_path).rest_endpoints()
