"""Origin matcher variants.

Matcher Types:
- WildcardMatcher: the "*" spec, matches every origin
- HierarchicalMatcher: scheme/host/port structured match
- OpaqueMatcher: exact string match for "scheme:opaque" specs

Every matcher is immutable and answers ``matches(origin)`` with a bool,
never raising on malformed input. ``serialize()`` rebuilds the spec text.

Example:
    matcher = HierarchicalMatcher(protocol="https", labels=("*", "example", "com"))
    matcher.matches("https://api.example.com")       # True
    matcher.matches("https://api.example.com:443")   # True
    matcher.matches("http://api.example.com")        # False
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any, ClassVar

from originmatch.grammar import compile_labels
from originmatch.urls import SplitURL, URLSyntaxError, split_url

DEFAULT_PORTS = {"http": "80", "https": "443"}
IMPLICIT_PROTOCOLS = frozenset(DEFAULT_PORTS)


def is_default_port(protocol: str, port: str) -> bool:
    """True if ``port`` is omitted or the well-known port of ``protocol``."""
    return port == "" or port == DEFAULT_PORTS.get(protocol)


class OriginMatcher(ABC):
    """Base class for all origin matchers."""

    kind: ClassVar[str]

    @abstractmethod
    def matches(self, origin: str) -> bool:
        """Check if an Origin header value is accepted by this matcher."""

    @abstractmethod
    def serialize(self) -> str:
        """Rebuild the canonical spec text for this matcher."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Describe the matcher for display."""

    def __str__(self) -> str:
        return self.serialize()


@dataclass(frozen=True)
class WildcardMatcher(OriginMatcher):
    """Matches any origin."""

    kind: ClassVar[str] = "wildcard"

    def matches(self, origin: str) -> bool:
        return True

    def serialize(self) -> str:
        return "*"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "spec": "*"}


@dataclass(frozen=True)
class OpaqueMatcher(OriginMatcher):
    """Matches only the exact spec string, e.g. "custom:app"."""

    kind: ClassVar[str] = "opaque"

    url: str

    def matches(self, origin: str) -> bool:
        return origin == self.url

    def serialize(self) -> str:
        return self.url

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "spec": self.url}


@dataclass(frozen=True)
class HierarchicalMatcher(OriginMatcher):
    """Structured scheme/host/port matcher.

    Exactly one of ``ipv4``, ``ipv6`` or ``labels`` is set. An empty
    ``protocol`` accepts both http and https; an empty ``port`` accepts the
    default port of the candidate's scheme.

    Rules are evaluated in order, stopping at the first failure:
    1. Scheme
    2. Host (IP literals compare exactly, names use the compiled pattern)
    3. Port (default ports are equivalent to an omitted port)
    """

    kind: ClassVar[str] = "hierarchical"

    protocol: str = ""
    ipv4: str = ""
    ipv6: str = ""
    labels: tuple[str, ...] = ()
    port: str = ""
    pattern: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        hosts = [bool(self.ipv4), bool(self.ipv6), bool(self.labels)]
        if hosts.count(True) != 1:
            raise ValueError("exactly one of ipv4, ipv6 or labels must be set")
        if self.labels and self.pattern is None:
            object.__setattr__(self, "pattern", compile_labels(self.labels))

    @property
    def host(self) -> str:
        """Host as written in the spec, IPv6 in brackets."""
        if self.ipv4:
            return self.ipv4
        if self.ipv6:
            return f"[{self.ipv6}]"
        return ".".join(self.labels)

    def matches(self, origin: str) -> bool:
        try:
            url = split_url(origin)
        except URLSyntaxError:
            return False

        return self._match_scheme(url) and self._match_host(url) and self._match_port(url)

    def _match_scheme(self, url: SplitURL) -> bool:
        if self.protocol:
            return url.scheme == self.protocol
        return url.scheme in IMPLICIT_PROTOCOLS

    def _match_host(self, url: SplitURL) -> bool:
        # str.lower() maps some non-ASCII letters onto ASCII (U+212A -> "k")
        if not url.host or not url.host.isascii():
            return False
        hostname = url.host.lower()

        try:
            address = ip_address(hostname)
        except ValueError:
            address = None

        if isinstance(address, IPv4Address):
            return hostname == self.ipv4
        if isinstance(address, IPv6Address):
            return hostname == self.ipv6
        return self.pattern is not None and self.pattern.fullmatch(hostname) is not None

    def _match_port(self, url: SplitURL) -> bool:
        if is_default_port(self.protocol, self.port) and is_default_port(url.scheme, url.port):
            return True
        return self.port == url.port

    def serialize(self) -> str:
        out = f"{self.protocol}://" if self.protocol else ""
        out += self.host
        if self.port:
            out += f":{self.port}"
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "spec": self.serialize(),
            "protocol": self.protocol or "http/https",
            "host": self.host,
            "port": self.port or "default",
            "pattern": self.pattern.pattern if self.pattern is not None else None,
        }
