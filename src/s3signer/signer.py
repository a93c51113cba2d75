"""AWS Signature Version 4 signer for S3 requests.

Produces either a header-based ``Authorization`` value (plus the headers it
signs) or a presigned URL carrying its signature in the query string.

References:
    - https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-header-based-auth.html
    - https://docs.aws.amazon.com/AmazonS3/latest/API/sigv4-query-string-auth.html
"""

import logging
import posixpath
import urllib.parse
from collections.abc import Mapping
from typing import TYPE_CHECKING

from s3signer.canonical import (
    RequestURL,
    build_canonical_request,
    canonical_query,
    signed_headers,
    split_url,
)
from s3signer.dates import Clock, Dates, utc_now
from s3signer.errors import ConfigError
from s3signer.logging_config import redact
from s3signer.models import Credentials, Expiration, HTTPMethod, validate_expiration
from s3signer.payload import (
    EMPTY,
    UNSIGNED_PAYLOAD,
    Payload,
    content_md5,
    resolve_payload,
)
from s3signer.region import AnyRegion, Region, resolve_region
from s3signer.signing import (
    ALGORITHM,
    SERVICE_NAME,
    build_string_to_sign,
    credential_scope,
    sign,
)

if TYPE_CHECKING:
    from s3signer.config import SignerConfig

logger = logging.getLogger(__name__)

# Header names as emitted on the wire.
AMZ_DATE_HEADER = "X-Amz-Date"
HOST_HEADER = "Host"
SECURITY_TOKEN_HEADER = "X-Amz-Security-Token"
CONTENT_SHA256_HEADER = "x-amz-content-sha256"
CONTENT_MD5_HEADER = "Content-MD5"
CONTENT_LENGTH_HEADER = "Content-Length"
CONTENT_TYPE_HEADER = "Content-Type"
AUTHORIZATION_HEADER = "Authorization"


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    """Set ``name`` to ``value``, replacing any header of the same name in any case."""
    for existing in [key for key in headers if key.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


def _path_extension(path: str) -> str:
    """Extension of the last path segment without the dot, or ''."""
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    return posixpath.splitext(segment)[1][1:]


class Signer:
    """Signs S3 requests with AWS Signature Version 4.

    A signer holds only immutable configuration (credentials, region,
    service and clock) and can be shared freely between threads.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        region: AnyRegion | str = Region.US_EAST_1,
        session_token: str | None = None,
        *,
        service: str = SERVICE_NAME,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the signer.

        Args:
            access_key: AWS access key ID.
            secret_key: AWS secret access key.
            region: A :class:`Region`, a :class:`CustomRegion` or a region code.
            session_token: Token for temporary credentials, if any.
            service: Service name placed in the credential scope.
            clock: Zero-argument callable returning the current datetime.
                Read once per signing call.

        Raises:
            UnknownRegion: If ``region`` is a code not in the region table.
        """
        self._credentials = Credentials(
            access_key=access_key,
            secret_key=secret_key,
            session_token=session_token,
        )
        self._region = resolve_region(region)
        self._service = service
        self._clock = clock or utc_now

    @classmethod
    def from_config(cls, config: "SignerConfig", clock: Clock | None = None) -> "Signer":
        """Build a signer from a loaded :class:`~s3signer.config.SignerConfig`.

        Raises:
            ConfigError: If the access key or secret key is missing.
        """
        creds = config.credentials
        if not creds.access_key or not creds.secret_key.get_secret_value():
            raise ConfigError("credentials.access_key and credentials.secret_key are required.")
        return cls(
            creds.access_key,
            creds.secret_key.get_secret_value(),
            config.region_spec(),
            creds.session_token or None,
            service=config.signing.service,
            clock=clock,
        )

    @property
    def access_key(self) -> str:
        return self._credentials.access_key

    @property
    def region(self) -> AnyRegion:
        """The region requests are signed for."""
        return self._region

    @property
    def service(self) -> str:
        """The service name placed in the credential scope."""
        return self._service

    def __repr__(self) -> str:
        return (
            f"Signer(access_key={self.access_key!r}, region={self.region.code!r}, "
            f"service={self.service!r})"
        )

    # -- Header-based auth ------------------------------------------------------

    def auth_header_v4(
        self,
        method: HTTPMethod | str,
        url: str,
        headers: Mapping[str, str] | None = None,
        payload: Payload = EMPTY,
    ) -> dict[str, str]:
        """Generate the headers for a header-authenticated request.

        Args:
            method: HTTP method.
            url: Full URL including scheme, e.g. a virtual-hosted
                ``https://bucket.s3.amazonaws.com/key`` or a path-style
                ``https://s3.amazonaws.com/bucket/key``.
            headers: Extra headers to sign. Not modified.
            payload: The request body.

        Returns:
            The caller's headers plus ``Authorization``, ``Host``,
            ``X-Amz-Date`` and, as applicable, ``x-amz-content-sha256``,
            ``X-Amz-Security-Token``, ``Content-MD5``, ``Content-Length``
            and ``Content-Type``.

        Raises:
            MalformedURL: If ``url`` cannot be parsed.
        """
        method = HTTPMethod.parse(method)
        request_url = split_url(url)
        dates = Dates.now(self._clock)

        digest = resolve_payload(payload)
        updated = self.prepare_headers(headers or {}, request_url, dates, digest.hash_hex)

        if method is HTTPMethod.PUT and payload.has_known_bytes:
            _set_header(updated, CONTENT_MD5_HEADER, content_md5(payload))

        authorization = self.authorization_header(
            method, request_url, updated, digest.hash_hex, dates
        )
        _set_header(updated, AUTHORIZATION_HEADER, authorization)

        if method is HTTPMethod.PUT:
            _set_header(updated, CONTENT_LENGTH_HEADER, digest.size_token)
            extension = _path_extension(request_url.path)
            if extension:
                _set_header(updated, CONTENT_TYPE_HEADER, extension)

        if payload.is_unsigned:
            _set_header(updated, CONTENT_SHA256_HEADER, digest.hash_hex)

        return updated

    def prepare_headers(
        self,
        headers: Mapping[str, str],
        url: RequestURL | str,
        dates: Dates,
        body_hash: str,
    ) -> dict[str, str]:
        """Return a copy of ``headers`` with the headers SigV4 requires.

        Adds ``X-Amz-Date``, ``Host`` (URL host, else the region host),
        ``X-Amz-Security-Token`` for temporary credentials and, unless the
        payload is unsigned, ``x-amz-content-sha256``.
        """
        request_url = url if isinstance(url, RequestURL) else split_url(url)
        updated = dict(headers)
        _set_header(updated, AMZ_DATE_HEADER, dates.long)
        _set_header(updated, HOST_HEADER, request_url.host or self.region.host)
        if body_hash != UNSIGNED_PAYLOAD:
            _set_header(updated, CONTENT_SHA256_HEADER, body_hash)
        if self._credentials.session_token:
            _set_header(updated, SECURITY_TOKEN_HEADER, self._credentials.session_token)
        return updated

    def authorization_header(
        self,
        method: HTTPMethod | str,
        url: RequestURL | str,
        headers: Mapping[str, str],
        body_hash: str,
        dates: Dates,
    ) -> str:
        """Sign a fully prepared request and format the ``Authorization`` value.

        Raises:
            MalformedURL: If ``url`` cannot be parsed.
        """
        canonical_request = build_canonical_request(method, url, headers, body_hash)
        signature = self._signature(canonical_request, dates)
        scope = credential_scope(dates, self.region.code, self.service)
        signed = signed_headers(headers)

        logger.debug(
            "Signed request headers",
            extra={"operation": "auth_header", "scope": scope, "signed_headers": signed},
        )
        return (
            f"{ALGORITHM} Credential={self.access_key}/{scope}, "
            f"SignedHeaders={signed}, Signature={signature}"
        )

    # -- Presigned URLs ---------------------------------------------------------

    def presigned_url_v4(
        self,
        method: HTTPMethod | str,
        url: str,
        expiration: Expiration | int,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        """Generate a presigned URL.

        Args:
            method: HTTP method the URL will be used with.
            url: Full URL including scheme.
            expiration: Seconds the URL stays valid, placed in
                ``X-Amz-Expires`` as given. AWS rejects values outside
                1 to 604800; that range is not checked here.
            headers: Extra headers the eventual request must carry; they are
                signed but not embedded in the URL.

        Returns:
            The URL with the ``X-Amz-*`` query parameters and a trailing
            ``X-Amz-Signature``.

        Raises:
            MalformedURL: If ``url`` cannot be parsed.
            InvalidExpiration: If ``expiration`` is not an integer.
        """
        method = HTTPMethod.parse(method)
        expires = validate_expiration(expiration)
        request_url = split_url(url)
        dates = Dates.now(self._clock)

        updated = dict(headers or {})
        _set_header(updated, HOST_HEADER, request_url.host or self.region.host)

        canonical_request, unsigned_url = self.presigned_canonical_request(
            method, request_url, expires, updated, dates
        )
        signature = self._signature(canonical_request, dates)
        return f"{unsigned_url}&X-Amz-Signature={signature}"

    def presigned_canonical_request(
        self,
        method: HTTPMethod | str,
        url: RequestURL | str,
        expiration: int,
        headers: Mapping[str, str],
        dates: Dates,
    ) -> tuple[str, str]:
        """Build the canonical request of a presigned URL.

        Returns:
            The canonical request and the URL carrying the encoded query
            (without ``X-Amz-Signature``).
        """
        request_url = url if isinstance(url, RequestURL) else split_url(url)
        scope = credential_scope(dates, self.region.code, self.service)
        signed = signed_headers(headers)

        injected = [
            ("X-Amz-Algorithm", ALGORITHM),
            ("X-Amz-Credential", f"{self.access_key}/{scope}"),
            ("X-Amz-Date", dates.long),
            ("X-Amz-Expires", str(expiration)),
            ("X-Amz-SignedHeaders", signed),
        ]
        if self._credentials.session_token:
            injected.append(("X-Amz-Security-Token", self._credentials.session_token))

        items = sorted([*request_url.query_items, *injected], key=lambda item: item[0])
        encoded_query = canonical_query(items)

        unsigned_url = urllib.parse.urlunsplit(
            (request_url.scheme, request_url.netloc, request_url.raw_path, encoded_query, "")
        )
        canonical_request = build_canonical_request(
            method,
            RequestURL(
                scheme=request_url.scheme,
                netloc=request_url.netloc,
                host=request_url.host,
                path=request_url.path,
                raw_path=request_url.raw_path,
                query_items=tuple(items),
            ),
            headers,
            UNSIGNED_PAYLOAD,
        )
        logger.debug(
            "Presigned request",
            extra={
                "operation": "presign",
                "method": HTTPMethod.parse(method).value,
                "host": request_url.host,
                "scope": scope,
                "signed_headers": signed,
            },
        )
        return canonical_request, unsigned_url

    # -- Internals --------------------------------------------------------------

    def _signature(self, canonical_request: str, dates: Dates) -> str:
        logger.debug("Canonical request:\n%s", redact(canonical_request))
        string_to_sign = build_string_to_sign(
            canonical_request, dates, self.region.code, self.service
        )
        logger.debug("String to sign:\n%s", string_to_sign)
        return sign(
            string_to_sign,
            self._credentials.secret(),
            dates.short,
            self.region.code,
            self.service,
        )
