"""Origin spec parsing.

A spec is tried against an ordered list of strategies; the first one that
produces a matcher wins:

    1. wildcard      "*"
    2. hierarchical  "http://host:port", "host", "host:port", "[::1]:3000"
    3. opaque        "scheme:opaque"

A strategy returns ``TRY_NEXT`` when the spec is not its shape and raises
an ``OriginSpecError`` when the spec is its shape but invalid.

Usage:
    origins = parse("https://*.example.com,localhost:3000")
    origins.matches("https://app.example.com")   # True
    origins.matches("http://localhost:3000")     # True
    str(origins)                                 # the input, unchanged
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from ipaddress import IPv4Address, IPv6Address, ip_address

import structlog

from originmatch.exceptions import (
    InvalidHostError,
    InvalidPortError,
    OriginSpecError,
    StrictModeMismatchError,
    UnparsableSpecError,
)
from originmatch.grammar import parse_host
from originmatch.matcher_set import MatcherSet
from originmatch.matchers import (
    HierarchicalMatcher,
    OpaqueMatcher,
    OriginMatcher,
    WildcardMatcher,
)
from originmatch.urls import SplitURL, URLAuthorityError, URLPortError, URLSyntaxError, split_url

logger = structlog.get_logger()

MAX_PORT = 65535


class ParseOutcome(Enum):
    """Sentinel returned by a strategy that does not apply to a spec."""

    TRY_NEXT = "try_next"


TRY_NEXT = ParseOutcome.TRY_NEXT

ParseStrategy = Callable[[str], "OriginMatcher | ParseOutcome"]


def _parse_wildcard(spec: str) -> OriginMatcher | ParseOutcome:
    if spec == "*":
        return WildcardMatcher()
    return TRY_NEXT


def _needs_scheme_prefix(url: SplitURL) -> bool:
    # "localhost" splits as a relative path, "localhost:3000" as scheme:opaque
    if not url.scheme and not url.host and not url.path.startswith("/"):
        return True
    return bool(url.opaque)


def _parse_hierarchical(spec: str) -> OriginMatcher | ParseOutcome:
    first: SplitURL | None
    try:
        first = split_url(spec)
    except URLPortError as e:
        raise InvalidPortError(spec, str(e)) from e
    except URLAuthorityError as e:
        raise UnparsableSpecError(spec, str(e)) from e
    except URLSyntaxError:
        first = None

    # The scheme is only a requirement when the spec spelled it out.
    if first is not None and not _needs_scheme_prefix(first):
        url, protocol = first, first.scheme
    else:
        try:
            url = split_url(f"https://{spec}")
        except URLSyntaxError:
            return TRY_NEXT
        protocol = ""

    port = url.port
    if port and int(port) > MAX_PORT:
        raise InvalidPortError(spec, f"port {port} out of range")

    if not url.host:
        raise InvalidHostError(spec, "empty host")
    if not url.host.isascii():
        raise InvalidHostError(spec, f"non-ASCII host {url.host!r}")
    hostname = url.host.lower()

    try:
        address = ip_address(hostname)
    except ValueError:
        address = None

    if isinstance(address, IPv4Address):
        return HierarchicalMatcher(protocol=protocol, ipv4=hostname, port=port)
    if isinstance(address, IPv6Address):
        return HierarchicalMatcher(protocol=protocol, ipv6=hostname, port=port)

    try:
        labels = parse_host(hostname)
    except InvalidHostError as e:
        raise InvalidHostError(spec, f"invalid host {hostname!r}, {e.reason}") from e
    return HierarchicalMatcher(protocol=protocol, labels=labels, port=port)


def _parse_opaque(spec: str) -> OriginMatcher | ParseOutcome:
    try:
        url = split_url(spec)
    except URLSyntaxError:
        return TRY_NEXT

    if url.scheme and url.opaque:
        return OpaqueMatcher(spec)
    return TRY_NEXT


STRATEGIES: tuple[ParseStrategy, ...] = (_parse_wildcard, _parse_hierarchical, _parse_opaque)


def parse_spec(spec: str) -> OriginMatcher:
    """Parse a single origin spec into a matcher.

    Args:
        spec: One spec, e.g. "https://*.example.com:8443".

    Returns:
        The matcher produced by the first applicable strategy.

    Raises:
        InvalidHostError: If the host breaks the wildcard grammar.
        InvalidPortError: If the port is non-numeric or out of range.
        UnparsableSpecError: If no strategy applies.
    """
    for strategy in STRATEGIES:
        result = strategy(spec)
        if isinstance(result, OriginMatcher):
            return result
    raise UnparsableSpecError(spec, "not a recognizable origin")


def build(specs: Iterable[str] | None) -> MatcherSet:
    """Build a matcher set from already split specs.

    Fails as a whole on the first invalid spec. ``None`` or an empty
    iterable gives a set that matches nothing.
    """
    matchers: list[OriginMatcher] = []
    for spec in specs or ():
        try:
            matchers.append(parse_spec(spec))
        except OriginSpecError as e:
            logger.warning("Invalid origin spec", spec=spec, error=str(e))
            raise
    return MatcherSet(tuple(matchers))


def parse(spec: str) -> MatcherSet:
    """Parse a comma-separated spec into a matcher set.

    An empty string gives a set that matches nothing.
    """
    if spec == "":
        return MatcherSet()
    return build(spec.split(","))


def check_strict(spec: str) -> None:
    """Reject a single spec that carries information the parser ignores.

    A spec passes when its parsed form serializes back to the exact input,
    so paths, queries, fragments, userinfo, upper-case letters and
    redundant punctuation are all refused.

    Raises:
        OriginSpecError: If the spec does not parse at all.
        StrictModeMismatchError: If it parses but does not round-trip.
    """
    serialized = parse_spec(spec).serialize()
    if serialized != spec:
        raise StrictModeMismatchError(spec, "spec does not round-trip", serialized)
