"""Cross-origin allow-lists with wildcard hostname patterns.

Usage:
    from originmatch import parse

    origins = parse("https://*.example.com,localhost:3000")
    if origins.matches(request.headers.get("origin", "")):
        ...
"""

from originmatch.exceptions import (
    InvalidHostError,
    InvalidPortError,
    OriginSpecError,
    StrictModeMismatchError,
    UnparsableSpecError,
)
from originmatch.matcher_set import MatcherSet
from originmatch.matchers import (
    HierarchicalMatcher,
    OpaqueMatcher,
    OriginMatcher,
    WildcardMatcher,
)
from originmatch.parser import build, check_strict, parse, parse_spec

__version__ = "0.1.0"

__all__ = [
    # Parsing
    "parse",
    "build",
    "parse_spec",
    "check_strict",
    # Matchers
    "MatcherSet",
    "OriginMatcher",
    "WildcardMatcher",
    "HierarchicalMatcher",
    "OpaqueMatcher",
    # Errors
    "OriginSpecError",
    "InvalidHostError",
    "InvalidPortError",
    "UnparsableSpecError",
    "StrictModeMismatchError",
]
