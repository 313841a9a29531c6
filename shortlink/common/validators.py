"""URL validation and canonicalization for the shortlink service."""

import re
from typing import Union
from urllib.parse import urlsplit, urlunsplit

from ..errors import EncodingError, MalformedUrl, MissingScheme, UnsupportedScheme


ALLOWED_SCHEMES = ("http", "https")

# Printable ASCII minus the characters RFC 3986 never allows in a URI
_ILLEGAL_URI_CHARS = re.compile(r'[^\x21-\x7e]|["<>\\^`{|}]')


def normalize_url(raw: Union[bytes, str], max_length: int = 2048) -> str:
    """Validate a submitted URL and return its canonical form.

    The canonical form lower-cases the scheme and host, turns an empty
    path into ``/`` and drops an empty query or fragment marker. Everything
    else is kept verbatim, so ``normalize_url(normalize_url(u)) ==
    normalize_url(u)``.

    Args:
        raw: Request body bytes (or already-decoded text)
        max_length: Longest accepted URL, in characters

    Returns:
        Canonical URL string

    Raises:
        EncodingError: If the bytes are not valid UTF-8
        MalformedUrl: If the text is not a usable absolute URL
        MissingScheme: If the URL has no scheme
        UnsupportedScheme: If the scheme is not http or https
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"invalid utf-8 in url: {e}") from e
    else:
        text = raw

    text = text.strip()
    if not text:
        raise MalformedUrl("invalid url: empty")

    if len(text) > max_length:
        raise MalformedUrl(f"invalid url: too long (max {max_length} characters)")

    bad = _ILLEGAL_URI_CHARS.search(text)
    if bad:
        raise MalformedUrl(f"invalid url: illegal character {bad.group()!r} at position {bad.start()}")

    try:
        parts = urlsplit(text)
        # Accessing .port validates it
        parts.port
    except ValueError as e:
        raise MalformedUrl(f"invalid url: {e}") from e

    if not parts.scheme:
        raise MissingScheme("url missing scheme")

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise UnsupportedScheme(f"unsupported url scheme: {scheme}")

    if not parts.hostname:
        raise MalformedUrl("invalid url: missing host")

    return urlunsplit((
        scheme,
        _lower_host(parts.netloc),
        parts.path or "/",
        parts.query,
        parts.fragment,
    ))


def _lower_host(netloc: str) -> str:
    """Lower-case the host[:port] part of a netloc, leaving userinfo alone."""
    userinfo, sep, hostport = netloc.rpartition("@")
    return f"{userinfo}{sep}{hostport.lower()}"
