"""Configuration loading and Pydantic models for s3signer."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr

from s3signer.models import Expiration
from s3signer.region import DEFAULT_REGION_CODE, AnyRegion, CustomRegion, Region
from s3signer.signing import SERVICE_NAME


class CredentialsConfig(BaseModel):
    """Access key, secret key and optional session token."""

    access_key: str = ""
    secret_key: SecretStr = SecretStr("")
    session_token: str = ""


class RegionConfig(BaseModel):
    """Region code and an optional custom endpoint host."""

    code: str = DEFAULT_REGION_CODE
    endpoint: str = ""


class SigningConfig(BaseModel):
    """Signing defaults."""

    service: str = SERVICE_NAME
    default_expires: int = int(Expiration.ONE_HOUR)


class LoggingConfig(BaseModel):
    """Log level and output format ('text' or 'json')."""

    level: str = "INFO"
    format: str = "text"


class SignerConfig(BaseModel):
    """Top-level s3signer configuration."""

    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    region: RegionConfig = Field(default_factory=RegionConfig)
    signing: SigningConfig = Field(default_factory=SigningConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def region_spec(self) -> AnyRegion:
        """Resolve the configured region.

        A non-empty ``endpoint`` yields a :class:`CustomRegion`; otherwise the
        code is looked up in the standard region table.

        Raises:
            UnknownRegion: If there is no endpoint and the code is unknown.
        """
        if self.region.endpoint:
            return CustomRegion(host=self.region.endpoint, code=self.region.code)
        return Region.from_code(self.region.code)


def _parse_credentials(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the credentials section from YAML data into a dict for Pydantic."""
    if data is None:
        return {}
    return {
        "access_key": data.get("access_key", ""),
        "secret_key": data.get("secret_key", ""),
        "session_token": data.get("session_token") or "",
    }


def _parse_region(data: dict[str, Any] | str | None) -> dict[str, Any]:
    """Parse the region section.

    Accepts either a bare code (``region: eu-west-1``) or a mapping with
    ``code`` and ``endpoint``.
    """
    if data is None:
        return {}
    if isinstance(data, str):
        return {"code": data}
    return {
        "code": data.get("code", DEFAULT_REGION_CODE),
        "endpoint": data.get("endpoint") or "",
    }


def _parse_signing(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the signing section."""
    if data is None:
        return {}
    return {
        "service": data.get("service", SERVICE_NAME),
        "default_expires": data.get("default_expires", int(Expiration.ONE_HOUR)),
    }


def _parse_logging(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the logging section."""
    if data is None:
        return {}
    return {
        "level": data.get("level", "INFO"),
        "format": data.get("format", "text"),
    }


def load_config(path: Path) -> SignerConfig:
    """Load a SignerConfig from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A fully populated SignerConfig validated by Pydantic.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    return SignerConfig(
        credentials=CredentialsConfig(**_parse_credentials(raw.get("credentials"))),
        region=RegionConfig(**_parse_region(raw.get("region"))),
        signing=SigningConfig(**_parse_signing(raw.get("signing"))),
        logging=LoggingConfig(**_parse_logging(raw.get("logging"))),
    )
