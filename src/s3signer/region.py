"""AWS regions and their default S3 hosts.

A region's code and host always travel together: standard regions derive the
host from the code, and :class:`CustomRegion` carries both explicitly for
S3-compatible endpoints.
"""

import enum
from dataclasses import dataclass

from s3signer.errors import UnknownRegion

DEFAULT_REGION_CODE = "us-east-1"


class Region(enum.Enum):
    """Standard AWS regions, valued by region code."""

    US_EAST_1 = "us-east-1"
    US_EAST_2 = "us-east-2"
    US_WEST_1 = "us-west-1"
    US_WEST_2 = "us-west-2"
    AF_SOUTH_1 = "af-south-1"
    AP_EAST_1 = "ap-east-1"
    AP_EAST_2 = "ap-east-2"
    AP_SOUTH_1 = "ap-south-1"
    AP_SOUTH_2 = "ap-south-2"
    AP_SOUTHEAST_1 = "ap-southeast-1"
    AP_SOUTHEAST_2 = "ap-southeast-2"
    AP_SOUTHEAST_3 = "ap-southeast-3"
    AP_SOUTHEAST_4 = "ap-southeast-4"
    AP_SOUTHEAST_5 = "ap-southeast-5"
    AP_SOUTHEAST_7 = "ap-southeast-7"
    AP_NORTHEAST_1 = "ap-northeast-1"
    AP_NORTHEAST_2 = "ap-northeast-2"
    AP_NORTHEAST_3 = "ap-northeast-3"
    CA_CENTRAL_1 = "ca-central-1"
    CA_WEST_1 = "ca-west-1"
    EU_CENTRAL_1 = "eu-central-1"
    EU_CENTRAL_2 = "eu-central-2"
    EU_WEST_1 = "eu-west-1"
    EU_WEST_2 = "eu-west-2"
    EU_WEST_3 = "eu-west-3"
    EU_SOUTH_1 = "eu-south-1"
    EU_SOUTH_2 = "eu-south-2"
    EU_NORTH_1 = "eu-north-1"
    IL_CENTRAL_1 = "il-central-1"
    ME_SOUTH_1 = "me-south-1"
    ME_CENTRAL_1 = "me-central-1"
    MX_CENTRAL_1 = "mx-central-1"
    SA_EAST_1 = "sa-east-1"
    US_GOV_EAST_1 = "us-gov-east-1"
    US_GOV_WEST_1 = "us-gov-west-1"
    CN_NORTH_1 = "cn-north-1"
    CN_NORTHWEST_1 = "cn-northwest-1"

    @property
    def code(self) -> str:
        return self.value

    @property
    def host(self) -> str:
        """Default S3 endpoint host for the region."""
        if self is Region.US_EAST_1:
            return "s3.amazonaws.com"
        if self.value.startswith("cn-"):
            return f"s3.{self.value}.amazonaws.com.cn"
        return f"s3.{self.value}.amazonaws.com"

    @classmethod
    def from_code(cls, code: str) -> "Region":
        """Look up a region by its code.

        Raises:
            UnknownRegion: If the code is not a standard AWS region.
        """
        try:
            return cls(code)
        except ValueError:
            raise UnknownRegion(code) from None


@dataclass(frozen=True)
class CustomRegion:
    """An S3-compatible endpoint outside the standard region table.

    Attributes:
        host: Host (optionally ``host:port``) used when the URL has none.
        code: Region code placed in the credential scope.
    """

    host: str
    code: str = DEFAULT_REGION_CODE


AnyRegion = Region | CustomRegion


def resolve_region(region: AnyRegion | str) -> AnyRegion:
    """Accept a region object or a standard region code."""
    if isinstance(region, (Region, CustomRegion)):
        return region
    return Region.from_code(region)
