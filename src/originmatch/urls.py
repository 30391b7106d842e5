"""URL splitting for origin specs and Origin header values.

split_url() wraps ``urllib.parse.urlsplit`` and adds the checks a plain
urlsplit skips:

    scheme:opaque                 -> opaque form (e.g. "localhost:3000")
    scheme://userinfo@host:port/p -> hierarchical form
    host/path                     -> relative path, no scheme

Control characters, a colon in the first segment of a scheme-less path
and non-numeric ports are rejected. No normalization is applied besides
lowercasing the scheme. Hosts keep their original case and IPv6 brackets
are stripped into ``bracketed``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

_PORT_RE = re.compile(r"[0-9]*")


class URLSyntaxError(ValueError):
    """Raised when a string cannot be split into URL components."""


class URLAuthorityError(URLSyntaxError):
    """Raised when the ``//authority`` part of a URL is malformed."""


class URLPortError(URLAuthorityError):
    """Raised when the authority carries a non-numeric port."""


@dataclass(frozen=True)
class SplitURL:
    """Components of a split URL. Empty strings mean "absent"."""

    scheme: str = ""
    opaque: str = ""
    userinfo: str | None = None
    host: str = ""
    bracketed: bool = False
    port: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""


def _split_authority(authority: str) -> tuple[str | None, str, bool, str]:
    # urlsplit().hostname lowercases and .port range-checks, so the raw
    # netloc is split here instead.
    userinfo = None
    at = authority.rfind("@")
    if at >= 0:
        userinfo, authority = authority[:at], authority[at + 1 :]

    if authority.startswith("["):
        end = authority.find("]")
        if end < 0:
            raise URLAuthorityError("missing ']' in host")
        host, colon_port, bracketed = authority[1:end], authority[end + 1 :], True
    else:
        host, colon, port = authority.rpartition(":")
        if colon:
            colon_port = colon + port
        else:
            host, colon_port = authority, ""
        bracketed = False

    if colon_port and (
        not colon_port.startswith(":") or not _PORT_RE.fullmatch(colon_port[1:])
    ):
        raise URLPortError(f"invalid port {colon_port!r} after host")

    return userinfo, host, bracketed, colon_port[1:]


def split_url(raw: str) -> SplitURL:
    """Split ``raw`` into URL components.

    Raises:
        URLSyntaxError: On control characters, a leading ``:``, a colon in
            the first segment of a scheme-less relative path, or a malformed
            authority (``URLAuthorityError`` / ``URLPortError``).
    """
    # urlsplit silently drops tabs and newlines
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in raw):
        raise URLSyntaxError("invalid control character in URL")

    try:
        parts = urlsplit(raw)
    except ValueError as e:
        raise URLAuthorityError(str(e)) from e

    if not parts.scheme and ":" in parts.path.split("/", 1)[0]:
        raise URLSyntaxError("first path segment in URL cannot contain colon")

    if parts.scheme and not parts.netloc and not parts.path.startswith("/"):
        return SplitURL(
            scheme=parts.scheme,
            opaque=parts.path,
            query=parts.query,
            fragment=parts.fragment,
        )

    userinfo, host, bracketed, port = None, "", False, ""
    if parts.netloc:
        userinfo, host, bracketed, port = _split_authority(parts.netloc)

    return SplitURL(
        scheme=parts.scheme,
        userinfo=userinfo,
        host=host,
        bracketed=bracketed,
        port=port,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
    )
