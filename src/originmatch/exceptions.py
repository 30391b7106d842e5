"""Errors raised while turning origin specs into matchers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class OriginSpecError(ValueError):
    """Base class for origin spec errors.

    Carries the offending spec text and a short human-readable reason.
    """

    spec: str
    reason: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.spec!r}"


class InvalidHostError(OriginSpecError):
    """Raised when a host violates the wildcard label grammar."""


class InvalidPortError(OriginSpecError):
    """Raised when a port is non-numeric or outside 0-65535."""


class UnparsableSpecError(OriginSpecError):
    """Raised when no parse strategy can interpret the spec."""


@dataclass(eq=False)
class StrictModeMismatchError(OriginSpecError):
    """Raised by check_strict() when a spec does not round-trip."""

    serialized: str = ""

    def __str__(self) -> str:
        return f"{self.reason}: {self.spec!r} (parsed as {self.serialized!r})"
