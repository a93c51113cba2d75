"""Request payload variants and their SigV4 digests."""

import base64
import enum
import hashlib
from dataclasses import dataclass
from typing import NamedTuple

from s3signer.errors import EncodingFailure

UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class PayloadKind(enum.Enum):
    """Which variant a :class:`Payload` holds."""

    DATA = "data"
    NONE = "none"
    UNSIGNED = "unsigned"


@dataclass(frozen=True)
class Payload:
    """The body of a request.

    Build instances with the constructors rather than directly:

    - ``Payload.data(content)``: a known body, hashed into the signature.
    - ``Payload.none()``: no body (e.g. GET); hashes as the empty string.
    - ``Payload.unsigned()``: the body is deliberately left out of the
      signature; useful when its size is unknown when signing.
    """

    kind: PayloadKind
    content: bytes = b""

    @classmethod
    def data(cls, content: bytes | str) -> "Payload":
        if isinstance(content, str):
            try:
                content = content.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise EncodingFailure(f"Payload cannot be encoded as UTF-8: {exc.reason}")
        return cls(PayloadKind.DATA, bytes(content))

    @classmethod
    def none(cls) -> "Payload":
        return EMPTY

    @classmethod
    def unsigned(cls) -> "Payload":
        return UNSIGNED

    @property
    def is_unsigned(self) -> bool:
        return self.kind is PayloadKind.UNSIGNED

    @property
    def has_known_bytes(self) -> bool:
        """True for data and none payloads, whose bytes are known up front."""
        return self.kind is not PayloadKind.UNSIGNED


EMPTY = Payload(PayloadKind.NONE)
UNSIGNED = Payload(PayloadKind.UNSIGNED)


class PayloadDigest(NamedTuple):
    """The resolved body hash and size token for a payload."""

    hash_hex: str
    size_token: str
    is_known_size: bool


def resolve_payload(payload: Payload) -> PayloadDigest:
    """Resolve the body hash and size token of a payload.

    Args:
        payload: The request payload.

    Returns:
        Lowercase hex SHA-256 and decimal byte length for data and none
        payloads; the ``UNSIGNED-PAYLOAD`` sentinel for both fields
        otherwise.
    """
    if payload.kind is PayloadKind.UNSIGNED:
        return PayloadDigest(UNSIGNED_PAYLOAD, UNSIGNED_PAYLOAD, False)
    if payload.kind is PayloadKind.NONE:
        return PayloadDigest(EMPTY_SHA256, "0", True)
    return PayloadDigest(
        hashlib.sha256(payload.content).hexdigest(),
        str(len(payload.content)),
        True,
    )


def content_md5(payload: Payload) -> str | None:
    """Return the base64 MD5 digest of a payload's bytes, or None if unsigned.

    S3 uses ``Content-MD5`` as a separate integrity check; it plays no part
    in the SigV4 hash.
    """
    if payload.kind is PayloadKind.UNSIGNED:
        return None
    digest = hashlib.md5(payload.content, usedforsecurity=False).digest()
    return base64.b64encode(digest).decode("ascii")
