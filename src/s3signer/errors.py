"""Error definitions for s3signer."""


class SignerError(Exception):
    """A signing error with a stable code and a human-readable message.

    Attributes:
        code: Short error code string (e.g. "BadURL", "EncodingFailure").
        message: Human-readable error description.
        extra_fields: Additional context (never secrets) for logs and callers.
    """

    def __init__(
        self,
        code: str,
        message: str,
        extra_fields: dict[str, str] | None = None,
    ) -> None:
        """Initialize the signer error.

        Args:
            code: Error code.
            message: Error description.
            extra_fields: Optional extra context.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.extra_fields = extra_fields or {}


# -- Signing errors ------------------------------------------------------------


class MalformedURL(SignerError):
    """The URL cannot be parsed or decomposed into path and query."""

    def __init__(self, url: str = "", message: str = "The URL could not be parsed.") -> None:
        super().__init__(
            code="BadURL",
            message=message,
            extra_fields={"URL": url} if url else {},
        )


# Name used by the public signing API.
BadURL = MalformedURL


class EncodingFailure(SignerError):
    """A string cannot be represented as UTF-8 bytes."""

    def __init__(self, message: str = "Value cannot be encoded as UTF-8.") -> None:
        super().__init__(code="EncodingFailure", message=message)


class InvalidExpiration(SignerError):
    """The presigned URL expiration is not an integer number of seconds."""

    def __init__(self, value: object = None) -> None:
        super().__init__(
            code="InvalidExpiration",
            message="Expiration must be an integer number of seconds.",
            extra_fields={"Expiration": str(value)} if value is not None else {},
        )


# -- Setup errors --------------------------------------------------------------


class UnknownRegion(SignerError):
    """The region code is not in the region table."""

    def __init__(self, code: str = "") -> None:
        super().__init__(
            code="UnknownRegion",
            message=f"Unknown AWS region: {code!r}." if code else "Unknown AWS region.",
            extra_fields={"Region": code} if code else {},
        )


class ConfigError(SignerError):
    """The configuration is missing required values."""

    def __init__(self, message: str = "Invalid configuration.") -> None:
        super().__init__(code="ConfigError", message=message)
