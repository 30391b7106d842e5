"""Ordered OR of origin matchers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from originmatch.matchers import OriginMatcher


@dataclass(frozen=True)
class MatcherSet:
    """An allow-list of origins built from a comma-separated spec.

    Matching is a logical OR over the members; the order only matters for
    ``serialize()``. An empty set matches nothing.
    """

    matchers: tuple[OriginMatcher, ...] = ()

    def matches(self, origin: str) -> bool:
        """Check if an Origin header value is allowed by any member."""
        return any(matcher.matches(origin) for matcher in self.matchers)

    def serialize(self) -> str:
        """Rebuild the comma-separated spec this set was parsed from."""
        return ",".join(matcher.serialize() for matcher in self.matchers)

    def __str__(self) -> str:
        return self.serialize()

    def __len__(self) -> int:
        return len(self.matchers)

    def __iter__(self) -> Iterator[OriginMatcher]:
        return iter(self.matchers)
