"""AWS provider defaults.

Immutable configuration dataclass injected into the provider instead of
module-level globals, so tests and callers can override any value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from clusternet.constants import (
    DEFAULT_REGION,
    DEFAULT_SECURITY_GROUP_DESCRIPTION,
    DEFAULT_SECURITY_GROUP_PREFIX,
    DEFAULT_SUBNET_CIDR,
    DEFAULT_TAG_KEY,
    DEFAULT_TAG_VALUE,
    DEFAULT_VPC_CIDR,
)


@dataclass(frozen=True, slots=True)
class AWSDefaults:
    """AWS networking defaults.

    All fields have sensible defaults.

    Example:
        >>> from clusternet.providers.aws import AWSDefaults
        >>> defaults = AWSDefaults(region="eu-west-1", vpc_cidr="172.31.0.0/16")

    Args:
        region: Region used for the client and for zone discovery.
        vpc_cidr: CIDR block for newly created VPCs.
        subnet_cidr: CIDR block for the subnet created inside a new VPC.
        tag_key: Tag key stamped on created resources.
        tag_value: Tag value stamped on created resources.
        security_group_prefix: Name prefix for created security groups.
        security_group_description: Description for created security groups.
    """

    region: str = DEFAULT_REGION
    vpc_cidr: str = DEFAULT_VPC_CIDR
    subnet_cidr: str = DEFAULT_SUBNET_CIDR
    tag_key: str = DEFAULT_TAG_KEY
    tag_value: str = DEFAULT_TAG_VALUE
    security_group_prefix: str = DEFAULT_SECURITY_GROUP_PREFIX
    security_group_description: str = DEFAULT_SECURITY_GROUP_DESCRIPTION

    def tag_specifications(self, resource_type: str) -> list[dict[str, Any]]:
        """``TagSpecifications`` payload for a create call."""
        return [
            {
                "ResourceType": resource_type,
                "Tags": [{"Key": self.tag_key, "Value": self.tag_value}],
            }
        ]
