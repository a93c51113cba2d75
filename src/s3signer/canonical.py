"""Canonical request construction for AWS Signature Version 4.

The canonical request is six ``\\n``-joined segments::

    METHOD
    /canonical/uri
    canonical=query&string=
    host:example.com\\nx-amz-date:20130524T000000Z\\n
    host;x-amz-date
    <payload hash>

References:
    - https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-header-based-auth.html
"""

import re
import urllib.parse
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from s3signer.encoding import encode_path, encode_query_component
from s3signer.errors import MalformedURL
from s3signer.models import HTTPMethod

# Excluded from canonical and signed headers (case-insensitive).
EXCLUDED_HEADER = "authorization"

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Whitespace and control characters are never valid unescaped in a URL.
_INVALID_URL_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")
# A '%' not followed by two hex digits.
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

QueryItem = tuple[str, str | None]


@dataclass(frozen=True)
class RequestURL:
    """A URL decomposed into the parts SigV4 signs.

    Attributes:
        scheme: URL scheme, possibly empty.
        netloc: Raw authority component, possibly empty.
        host: ``hostname[:port]`` for the Host header, or None if the URL
            has no host. The port is kept only when it is not the scheme's
            default.
        path: Percent-decoded path.
        raw_path: Path exactly as it appeared in the URL.
        query_items: Decoded ``(name, value)`` pairs in URL order; value is
            None when the item had no ``=``.
        fragment: Raw fragment, possibly empty.
    """

    scheme: str
    netloc: str
    host: str | None
    path: str
    raw_path: str
    query_items: tuple[QueryItem, ...]
    fragment: str = ""


def split_url(url: str) -> RequestURL:
    """Decompose a URL string into path, query items and host.

    Args:
        url: The full request URL (``https://bucket.s3.amazonaws.com/key``).

    Returns:
        The decomposed :class:`RequestURL`.

    Raises:
        MalformedURL: If the URL is empty, contains whitespace or control
            characters, has an invalid percent escape, or an unparsable
            host or port.
    """
    if not isinstance(url, str) or not url:
        raise MalformedURL(message="URL must be a non-empty string.")
    if _INVALID_URL_CHARS_RE.search(url):
        raise MalformedURL(url, "URL contains whitespace or control characters.")
    if _BAD_ESCAPE_RE.search(url):
        raise MalformedURL(url, "URL contains an invalid percent escape.")

    try:
        parts = urllib.parse.urlsplit(url)
        hostname = parts.hostname
        port = parts.port
        path = _unquote(parts.path)
        query_items = _parse_query(parts.query)
    except ValueError as exc:
        raise MalformedURL(url, f"URL could not be parsed: {exc}") from exc

    return RequestURL(
        scheme=parts.scheme,
        netloc=parts.netloc,
        host=_render_host(parts.scheme, hostname, port),
        path=path,
        raw_path=parts.path,
        query_items=tuple(query_items),
        fragment=parts.fragment,
    )


def _unquote(value: str) -> str:
    """Percent-decode ``%XX`` escapes only ('+' stays literal).

    Raises:
        ValueError: If the decoded bytes are not valid UTF-8.
    """
    return urllib.parse.unquote(value, errors="strict")


def _parse_query(query: str) -> list[QueryItem]:
    """Split a raw query string into decoded ``(name, value)`` pairs."""
    items: list[QueryItem] = []
    for pair in query.split("&"):
        if not pair:
            continue
        name, sep, value = pair.partition("=")
        items.append((_unquote(name), _unquote(value) if sep else None))
    return items


def _render_host(scheme: str, hostname: str | None, port: int | None) -> str | None:
    if not hostname:
        return None
    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != _DEFAULT_PORTS.get(scheme.lower()):
        host = f"{host}:{port}"
    return host


def _as_request_url(url: "RequestURL | str") -> RequestURL:
    return url if isinstance(url, RequestURL) else split_url(url)


# -- Canonical segments --------------------------------------------------------


def canonical_uri(path: str) -> str:
    """Percent-encode a decoded path; an empty path becomes ``/``."""
    if not path:
        return "/"
    return encode_path(path)


def canonical_query(items: Iterable[QueryItem]) -> str:
    """Build the canonical query string.

    Names and values are encoded independently, joined as ``name=value``
    (missing values become empty), and the encoded pairs are sorted
    ordinally. Sorting happens after encoding.
    """
    pairs = [
        f"{encode_query_component(name)}={encode_query_component(value or '')}"
        for name, value in items
    ]
    return "&".join(sorted(pairs))


def _signable_headers(headers: Mapping[str, str]) -> list[tuple[str, str]]:
    """Lowercased ``(name, value)`` pairs minus Authorization, sorted by name."""
    lowered = [
        (name.lower(), value)
        for name, value in headers.items()
        if name.lower() != EXCLUDED_HEADER
    ]
    # Stable sort on the name alone; values never take part in ordering.
    lowered.sort(key=lambda item: item[0])
    return lowered


def canonical_headers(headers: Mapping[str, str]) -> str:
    """Render ``name:value`` lines, sorted by lowercase name, with a trailing newline.

    Values are used exactly as given.
    """
    lines = [f"{name}:{value}" for name, value in _signable_headers(headers)]
    return "\n".join(lines) + "\n"


def signed_headers(headers: Mapping[str, str]) -> str:
    """Semicolon-separated, sorted, lowercase header names."""
    return ";".join(name for name, _ in _signable_headers(headers))


def build_canonical_request(
    method: HTTPMethod | str,
    url: RequestURL | str,
    headers: Mapping[str, str],
    body_hash: str,
) -> str:
    """Assemble the canonical request string.

    Args:
        method: HTTP method.
        url: Request URL, as a string or an already split :class:`RequestURL`.
        headers: Every header that will be signed.
        body_hash: Hex SHA-256 of the body or ``UNSIGNED-PAYLOAD``.

    Returns:
        The six segments joined with ``\\n``.

    Raises:
        MalformedURL: If ``url`` cannot be decomposed.
    """
    request_url = _as_request_url(url)
    return "\n".join(
        [
            HTTPMethod.parse(method).value,
            canonical_uri(request_url.path),
            canonical_query(request_url.query_items),
            canonical_headers(headers),
            signed_headers(headers),
            body_hash,
        ]
    )
