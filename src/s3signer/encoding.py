"""Percent-encoding tables for SigV4 canonicalization.

Every byte outside the allowed set becomes ``%`` followed by two uppercase
hex digits. Input text is encoded as UTF-8 first, so a multi-byte character
produces one ``%XX`` group per byte.
"""

import string

from s3signer.errors import EncodingFailure

_ALPHANUMERICS = frozenset(string.ascii_letters + string.digits)

# '/' is never escaped in a path.
PATH_ALLOWED = _ALPHANUMERICS | frozenset("-._~/")

# '=' and '&' pass through so a pre-joined "key=value" is not escaped twice.
QUERY_ALLOWED = _ALPHANUMERICS | frozenset("-._~=&")


def percent_encode(value: str | bytes, allowed: frozenset[str]) -> str:
    """Percent-encode ``value`` byte by byte.

    Args:
        value: Text (encoded as UTF-8) or raw bytes.
        allowed: ASCII characters passed through unchanged. ASCII
            alphanumerics always pass through; every other byte, including
            any of ``-._~`` missing from ``allowed``, is escaped.

    Returns:
        The encoded string.

    Raises:
        EncodingFailure: If ``value`` is text that is not valid UTF-8
            (e.g. contains lone surrogates).
    """
    if isinstance(value, str):
        try:
            value = value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodingFailure(f"Value cannot be encoded as UTF-8: {exc.reason}")
    safe = {ord(char) for char in allowed | _ALPHANUMERICS if char.isascii()}
    return "".join(chr(byte) if byte in safe else f"%{byte:02X}" for byte in value)


def encode_path(path: str) -> str:
    """Encode a decoded URL path for the canonical URI."""
    return percent_encode(path, PATH_ALLOWED)


def encode_query_component(value: str) -> str:
    """Encode one query parameter name or value."""
    return percent_encode(value, QUERY_ALLOWED)
