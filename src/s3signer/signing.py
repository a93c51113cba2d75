"""String-to-sign construction and SigV4 signing key derivation.

References:
    - https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-header-based-auth.html
"""

import hashlib
import hmac

from s3signer.dates import Dates

ALGORITHM = "AWS4-HMAC-SHA256"
KEY_PREFIX = "AWS4"
SCOPE_TERMINATOR = "aws4_request"
SERVICE_NAME = "s3"


def credential_scope(dates: Dates, region_code: str, service: str = SERVICE_NAME) -> str:
    """Return the ``YYYYMMDD/region/service/aws4_request`` scope."""
    return f"{dates.short}/{region_code}/{service}/{SCOPE_TERMINATOR}"


def build_string_to_sign(
    canonical_request: str,
    dates: Dates,
    region_code: str,
    service: str = SERVICE_NAME,
) -> str:
    """Build the string to sign.

    Args:
        canonical_request: The assembled canonical request string.
        dates: Timestamps of the request.
        region_code: Region placed in the credential scope.
        service: Signed service name.

    Returns:
        Algorithm, long date, credential scope and the hex SHA-256 of the
        canonical request, joined with ``\\n``.
    """
    canonical_hash = hashlib.sha256(canonical_request.encode("utf-8")).hexdigest()
    scope = credential_scope(dates, region_code, service)
    return f"{ALGORITHM}\n{dates.long}\n{scope}\n{canonical_hash}"


def _hmac(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def derive_signing_key(secret_key: str, date: str, region: str, service: str = SERVICE_NAME) -> bytes:
    """Derive the SigV4 signing key via the HMAC-SHA256 chain.

    Each step is keyed with the raw digest of the previous step, not its
    hex text.

    Args:
        secret_key: The secret access key.
        date: Date string (YYYYMMDD).
        region: AWS region code.
        service: AWS service name.

    Returns:
        The 32-byte signing key.
    """
    k_date = _hmac((KEY_PREFIX + secret_key).encode("utf-8"), date)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, SCOPE_TERMINATOR)


def compute_signature(signing_key: bytes, string_to_sign: str) -> str:
    """Compute the final HMAC-SHA256 hex signature."""
    return hmac.new(signing_key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()


def sign(
    string_to_sign: str,
    secret_key: str,
    date: str,
    region: str,
    service: str = SERVICE_NAME,
) -> str:
    """Derive the signing key and sign ``string_to_sign``.

    Returns:
        64-character lowercase hex signature.
    """
    return compute_signature(derive_signing_key(secret_key, date, region, service), string_to_sign)
