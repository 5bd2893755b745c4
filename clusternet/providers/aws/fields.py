"""Typed keys over the InfraSpec/InfraStatus pair.

Each ``ResourceField`` names one resource identifier and knows where it
lives in the user's spec (if anywhere) and in the status record. Lifecycle
code never touches spec or status attributes for these identifiers
directly; it goes through the keys below.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from clusternet.types import InfraSpec, InfraStatus

type SpecGetter = Callable[[InfraSpec], str]


def _no_spec_value(spec: InfraSpec) -> str:
    return ""


@dataclass(frozen=True, slots=True)
class ResourceField:
    """A named (spec path, status path) pair.

    Args:
        name: Human-readable key name, used in logs and errors.
        attr: Attribute of ``ClusterStatus`` holding the recorded value.
        spec_getter: Reads the user-declared override from ``InfraSpec``.
    """

    name: str
    attr: str
    spec_getter: SpecGetter = _no_spec_value

    def cluster_value(self, spec: InfraSpec) -> str:
        """User-declared value, or empty. Never mutates anything."""
        return self.spec_getter(spec) or ""

    def value(self, status: InfraStatus) -> str:
        """Currently recorded value, or empty."""
        return getattr(status.cluster, self.attr)

    def set_value(self, status: InfraStatus, value: str) -> None:
        """Record ``value``. The only writer of these status attributes."""
        setattr(status.cluster, self.attr, value)

    def is_externally_owned(self, spec: InfraSpec, status: InfraStatus) -> bool:
        """Whether delete must leave this resource alone.

        True only when the user declared the value *and* it made it into
        status. A declared value that never reached status does not count.
        """
        return bool(self.cluster_value(spec)) and bool(self.value(status))


VPC_ID = ResourceField("VpcID", "vpc_id", lambda spec: spec.network.vpc_id)
SUBNET_ID = ResourceField("SubnetID", "subnet_id", lambda spec: spec.network.subnet_id)
SUBNET_ZONE_ID = ResourceField("SubnetZoneID", "subnet_zone_id")
SECURITY_GROUP_ID = ResourceField(
    "SecurityGroupID", "security_group_id", lambda spec: spec.network.security_group_id,
)
EGRESS_GATEWAY_ID = ResourceField("EgressGatewayID", "egress_gateway_id")
EIP_ID = ResourceField("EipID", "eip_id")
EIP_ASSOCIATION_ID = ResourceField("EipAssociationID", "eip_association_id")

ALL_FIELDS: tuple[ResourceField, ...] = (
    VPC_ID,
    SUBNET_ID,
    SUBNET_ZONE_ID,
    SECURITY_GROUP_ID,
    EGRESS_GATEWAY_ID,
    EIP_ID,
    EIP_ASSOCIATION_ID,
)
