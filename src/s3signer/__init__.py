"""s3signer - AWS Signature Version 4 signing for S3 requests.

Header-based ``Authorization`` values and presigned URLs, with no network
I/O of its own.
"""

from s3signer.errors import (
    BadURL,
    ConfigError,
    EncodingFailure,
    InvalidExpiration,
    MalformedURL,
    SignerError,
    UnknownRegion,
)
from s3signer.models import Credentials, Expiration, HTTPMethod
from s3signer.payload import EMPTY, UNSIGNED, UNSIGNED_PAYLOAD, Payload
from s3signer.region import CustomRegion, Region
from s3signer.signer import Signer

__version__ = "0.1.0"
__all__ = [
    "BadURL",
    "ConfigError",
    "Credentials",
    "CustomRegion",
    "EMPTY",
    "EncodingFailure",
    "Expiration",
    "HTTPMethod",
    "InvalidExpiration",
    "MalformedURL",
    "Payload",
    "Region",
    "Signer",
    "SignerError",
    "UNSIGNED",
    "UNSIGNED_PAYLOAD",
    "UnknownRegion",
]
