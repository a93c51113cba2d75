"""Credentials, HTTP methods and presigned URL expirations."""

import enum

from pydantic import BaseModel, ConfigDict, SecretStr

from s3signer.errors import InvalidExpiration


class Credentials(BaseModel):
    """AWS credentials held by a signer for its lifetime.

    The secret key is a ``SecretStr`` so it never shows up in ``repr()``,
    logs or ``model_dump()`` output.
    """

    model_config = ConfigDict(frozen=True)

    access_key: str
    secret_key: SecretStr
    session_token: str | None = None

    def secret(self) -> str:
        return self.secret_key.get_secret_value()


class HTTPMethod(str, enum.Enum):
    """HTTP methods; the value is the uppercase wire string."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, method: "HTTPMethod | str") -> "HTTPMethod":
        """Normalise a method given as enum member or string.

        Raises:
            ValueError: If the method is not supported.
        """
        if isinstance(method, cls):
            return method
        return cls(method)


class Expiration(enum.IntEnum):
    """Common presigned URL lifetimes, in seconds.

    Any ``int`` works where an ``Expiration`` is accepted and is sent as
    given. AWS rejects presigned URLs valid for more than ``SEVEN_DAYS``
    (or for no time at all); those limits are left to the service.
    """

    THIRTY_MINUTES = 1800
    ONE_HOUR = 3600
    THREE_HOURS = 10800
    SIX_HOURS = 21600
    TWELVE_HOURS = 43200
    TWENTY_FOUR_HOURS = 86400
    SEVEN_DAYS = 604800


def validate_expiration(value: int) -> int:
    """Return a presigned URL expiration as a plain int.

    No range is enforced; zero and negative values pass through.

    Raises:
        InvalidExpiration: If ``value`` is not an ``int`` (``bool`` included).
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidExpiration(value)
    return int(value)
