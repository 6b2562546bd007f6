"""
Response Resolvers

Strategies that decide which response an endpoint returns on each call.

Strategies:
- static: the same response every time
- weighted: random pick, each entry chosen with probability weight/total
- sequence: responses in order, then loop or repeat the last one
"""

import random
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import InvariantViolationError, ValidationError
from .response import Response


SEQUENCE_LOOP = "loop"
SEQUENCE_REPEAT_LAST = "repeatLast"
SEQUENCE_BEHAVIORS = (SEQUENCE_LOOP, SEQUENCE_REPEAT_LAST)


class ResponseResolver(ABC):
    """Produces the next response for an endpoint."""

    name: str = "resolver"

    @abstractmethod
    def next_response(self) -> Response:
        """Return the response for the current call."""


class StaticResponse(ResponseResolver):
    """Always returns the same response."""

    name = "static"

    def __init__(self, response: Response):
        self.response = response

    def next_response(self) -> Response:
        return self.response


class NumberGenerator(ABC):
    """Source of integers for weighted selection."""

    @abstractmethod
    def n(self, total: int) -> int:
        """Return an integer in the half-open interval [0, total)."""


class RandomNumberGenerator(NumberGenerator):
    """
    Uniform generator backed by a private random.Random instance.

    Seeded from OS entropy on creation, so every process gets a fresh
    sequence. randrange() runs under the GIL and is safe to share between
    request handlers.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def n(self, total: int) -> int:
        return self._random.randrange(total)


@dataclass(frozen=True)
class WeightedResponseEntry:
    """A response and its relative weight."""

    response: Response
    weight: int


class WeightedResponse(ResponseResolver):
    """
    Picks a response at random, proportionally to its weight.

    The range [0, total) is split into consecutive slices, one per entry in
    the given order, each as wide as the entry's weight. A draw landing in a
    slice selects that entry, so a fixed generator always yields the same
    response.

    Example:
        resolver = WeightedResponse([
            WeightedResponseEntry(ok, weight=9),
            WeightedResponseEntry(error, weight=1),
        ])
        resolver.next_response()  # ok ~90% of the time
    """

    name = "weighted"

    def __init__(
        self,
        entries: Sequence[WeightedResponseEntry],
        number_generator: Optional[NumberGenerator] = None
    ):
        """
        Initialize weighted resolver.

        Args:
            entries: Ordered (response, weight) entries, weights >= 1
            number_generator: Source of draws (default: RandomNumberGenerator)

        Raises:
            ValidationError: If entries is empty or a weight is below 1
        """
        if not entries:
            raise ValidationError("no weighted responses")

        self.number_generator = number_generator or RandomNumberGenerator()
        self.responses: List[Response] = []
        self.cumulative_weights: List[int] = []

        total = 0
        for entry in entries:
            if entry.weight <= 0:
                raise ValidationError(f"weight must be >= 1: {entry.weight}")
            total += entry.weight
            self.cumulative_weights.append(total)
            self.responses.append(entry.response)

        self.weight_total = total

    def next_response(self) -> Response:
        value = self.number_generator.n(self.weight_total)

        if 0 <= value < self.weight_total:
            for i, cumulative in enumerate(self.cumulative_weights):
                if value < cumulative:
                    return self.responses[i]

        raise InvariantViolationError(
            f"number generator returned {value}, expected a value in [0, {self.weight_total})"
        )


class SequencedResponse(ResponseResolver):
    """
    Returns responses in order, one per call.

    Once the last response has been served the sequence either starts
    over ("loop") or keeps serving the last response ("repeatLast").

    Thread-safe: the cursor is read and advanced under a lock, so
    concurrent callers never receive the same position twice.
    """

    name = "sequence"

    def __init__(self, end_behavior: str, sequence: Sequence[Response]):
        """
        Initialize sequenced resolver.

        Args:
            end_behavior: "loop" or "repeatLast"
            sequence: Responses to serve, in order

        Raises:
            ValidationError: If end_behavior is unknown or sequence is empty
        """
        if end_behavior not in SEQUENCE_BEHAVIORS:
            raise ValidationError(f"unknown sequence end behavior {end_behavior!r}")
        if not sequence:
            raise ValidationError("no sequence responses")

        self.end_behavior = end_behavior
        self.sequence = tuple(sequence)
        self._idx = 0
        self._lock = threading.Lock()

    def next_response(self) -> Response:
        with self._lock:
            response = self.sequence[self._idx]
            if self._idx < len(self.sequence) - 1:
                self._idx += 1
            elif self.end_behavior == SEQUENCE_LOOP:
                self._idx = 0
            return response
