"""Wildcard hostname grammar and regex synthesis.

A host in an origin spec is a dot-separated sequence of DNS labels. The
leftmost labels may contain a single ``*`` each, which expands to part of
(or all of) exactly one label:

    - *.example.com matches: api.example.com, www.example.com
    - *.example.com does NOT match: deep.api.example.com (one label only)
    - *.example.com does NOT match: example.com (a label is required)
    - api-*.example.com matches: api-v1.example.com, api-.example.com
    - *-api.example.com matches: -api.example.com, v1-api.example.com

Wildcards are only allowed in a leading run of labels and never in the
last label, so "*.com" is accepted while "a.*" and "*.*" are not.
"""

from __future__ import annotations

import re
from functools import lru_cache

from originmatch.exceptions import InvalidHostError

WILDCARD = "*"

_LABEL_RE = re.compile(r"[a-zA-Z0-9*][-a-zA-Z0-9*]*[a-zA-Z0-9*]?")

_LEADING = "[a-zA-Z0-9]"
_MIDDLE = "[-a-zA-Z0-9]*"
_TRAILING = "[a-zA-Z0-9]?"


def parse_host(hostname: str) -> tuple[str, ...]:
    """Validate a hostname and split it into labels.

    Args:
        hostname: Host part of a spec, e.g. "*.example.com".

    Returns:
        The labels, left to right.

    Raises:
        InvalidHostError: If a label is malformed or a wildcard is misplaced.

    Examples:
        >>> parse_host("*.example.com")
        ('*', 'example', 'com')
        >>> parse_host("localhost")
        ('localhost',)
        >>> parse_host("a.*")
        Traceback (most recent call last):
        ...
        originmatch.exceptions.InvalidHostError: wildcard after a plain label: 'a.*'
    """
    labels = hostname.split(".")
    last = len(labels) - 1
    expect_no_more_star = False

    for index, label in enumerate(labels):
        stars = label.count(WILDCARD)
        if stars and expect_no_more_star:
            raise InvalidHostError(hostname, "wildcard after a plain label")
        if stars and index == last:
            raise InvalidHostError(hostname, "wildcard in the last label")
        if stars > 1:
            raise InvalidHostError(hostname, "more than one wildcard in a label")
        if not stars:
            expect_no_more_star = True
        if not _LABEL_RE.fullmatch(label):
            raise InvalidHostError(hostname, f"invalid label {label!r}")

    return tuple(labels)


def label_to_pattern(label: str) -> str:
    """Convert one validated label to a regex fragment.

    Examples:
        >>> label_to_pattern("example")
        'example'
        >>> label_to_pattern("*")
        '[a-zA-Z0-9][-a-zA-Z0-9]*[a-zA-Z0-9]?'
        >>> label_to_pattern("*a")
        '([a-zA-Z0-9][-a-zA-Z0-9]*)?a'
        >>> label_to_pattern("a*")
        'a[-a-zA-Z0-9]*[a-zA-Z0-9]?'
        >>> label_to_pattern("a*b")
        'a[-a-zA-Z0-9]*b'
    """
    index = label.find(WILDCARD)
    if index < 0:
        return re.escape(label)

    prefix = re.escape(label[:index])
    suffix = re.escape(label[index + 1 :])
    if index == 0:
        if not suffix:
            return _LEADING + _MIDDLE + _TRAILING
        return f"({_LEADING}{_MIDDLE})?{suffix}"
    if index == len(label) - 1:
        return prefix + _MIDDLE + _TRAILING
    return prefix + _MIDDLE + suffix


def labels_to_pattern(labels: tuple[str, ...]) -> str:
    """Join label fragments into one anchored pattern source.

    Examples:
        >>> labels_to_pattern(("*", "example", "com"))
        '^[a-zA-Z0-9][-a-zA-Z0-9]*[a-zA-Z0-9]?\\\\.example\\\\.com$'
    """
    return "^" + r"\.".join(label_to_pattern(label) for label in labels) + "$"


@lru_cache(maxsize=1000)
def compile_labels(labels: tuple[str, ...]) -> re.Pattern[str]:
    """Compile a label sequence to a regex (cached).

    Use ``fullmatch()`` on the result; a wildcard never matches a ".".
    """
    return re.compile(labels_to_pattern(labels))
