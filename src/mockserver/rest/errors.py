"""
Mock Server Errors

Exception hierarchy shared by the resolution engine and the config layer.
"""


class MockServerError(Exception):
    """Base class for all mock server errors."""


class ValidationError(MockServerError, ValueError):
    """
    Raised when a response, resolver or endpoint is built from invalid input.

    Validation errors surface at startup and must stop the server from
    serving traffic.
    """


class InvariantViolationError(MockServerError, RuntimeError):
    """
    Raised when an internal contract is broken at resolution time.

    Only reachable through a faulty injected number generator. The request
    that hit it fails; nothing else is affected.
    """
