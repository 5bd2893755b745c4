"""EC2 client wiring and thin query wrappers.

The raw boto3 client is exposed as ``EC2Helper.svc``; lifecycle code calls
it directly for single-request operations. Operations that take more than
one request (subnet lookup-or-create, gateway create-and-attach) or that
need response flattening live on ``EC2Helper``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import boto3
from injector import Module, provider, singleton
from loguru import logger

from clusternet.types import ExportPort

from .config import AWSDefaults

if TYPE_CHECKING:
    from mypy_boto3_ec2 import EC2Client

log = logger.bind(component="aws-ec2")


def create_describe_instances_tag(tags: Mapping[str, str]) -> list[dict[str, Any]]:
    """Build ``tag:<key>`` filters for ``describe_instances``."""
    return [{"Name": f"tag:{key}", "Values": [value]} for key, value in tags.items()]


def ingress_permissions(ports: Iterable[ExportPort]) -> list[dict[str, Any]]:
    """Translate export ports into ``IpPermissions`` entries."""
    permissions = []
    for port in ports:
        from_port, to_port = port.port_range
        permissions.append({
            "IpProtocol": str(port.protocol),
            "FromPort": from_port,
            "ToPort": to_port,
            "IpRanges": [{"CidrIp": port.cidr_ip}],
        })
    return permissions


class EC2Helper:
    """Wraps an EC2 client with the multi-request helpers lifecycle code needs."""

    def __init__(self, svc: EC2Client, defaults: AWSDefaults) -> None:
        self.svc = svc
        self.defaults = defaults

    def get_or_create_subnet(self, vpc_id: str, zone_id: str = "") -> dict[str, Any]:
        """Return the first subnet of ``vpc_id``, creating one if there is none.

        Args:
            vpc_id: VPC to look in.
            zone_id: Availability zone ID for a newly created subnet. Ignored
                when a subnet already exists.

        Returns:
            The EC2 ``Subnet`` structure (``SubnetId``, ``AvailabilityZoneId``...).
        """
        existing = self.svc.describe_subnets(
            Filters=[{"Name": "vpc-id", "Values": [vpc_id]}],
        )
        if existing["Subnets"]:
            subnet = existing["Subnets"][0]
            log.debug("Reusing subnet {subnet_id} in {vpc_id}", subnet_id=subnet["SubnetId"], vpc_id=vpc_id)
            return subnet

        request: dict[str, Any] = {
            "VpcId": vpc_id,
            "CidrBlock": self.defaults.subnet_cidr,
            "TagSpecifications": self.defaults.tag_specifications("subnet"),
        }
        if zone_id:
            request["AvailabilityZoneId"] = zone_id
        response = self.svc.create_subnet(**request)
        subnet = response["Subnet"]
        log.info("Created subnet {subnet_id} in {vpc_id}", subnet_id=subnet["SubnetId"], vpc_id=vpc_id)
        return subnet

    def bind_egress_gateway_to_vpc(self, vpc_id: str) -> str:
        """Create an internet gateway and attach it to ``vpc_id``.

        Returns:
            The gateway ID. If the attach fails the gateway is left behind.
        """
        response = self.svc.create_internet_gateway(
            TagSpecifications=self.defaults.tag_specifications("internet-gateway"),
        )
        gateway_id = response["InternetGateway"]["InternetGatewayId"]
        self.svc.attach_internet_gateway(InternetGatewayId=gateway_id, VpcId=vpc_id)
        log.info("Attached gateway {gateway_id} to {vpc_id}", gateway_id=gateway_id, vpc_id=vpc_id)
        return gateway_id

    def authorize_security_group_ingress(self, group_id: str, ports: Iterable[ExportPort]) -> bool:
        """Open ``ports`` on ``group_id``.

        Returns:
            The ``Return`` flag from EC2. A group with no ports to open is
            trivially authorized.
        """
        permissions = ingress_permissions(ports)
        if not permissions:
            return True
        response = self.svc.authorize_security_group_ingress(
            GroupId=group_id,
            IpPermissions=permissions,
        )
        return bool(response.get("Return", True))

    def get_instance_infos(self, filters: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Instances matching ``filters``, flattened across reservations."""
        response = self.svc.describe_instances(Filters=filters)
        return [
            instance
            for reservation in response.get("Reservations", [])
            for instance in reservation.get("Instances", [])
        ]


class EC2Module(Module):
    """DI module that provides the EC2 client and helper.

    Usage:
        >>> from injector import Injector
        >>> from clusternet.providers.aws import AWSDefaults, EC2Module
        >>>
        >>> injector = Injector([EC2Module(AWSDefaults(region="eu-west-1"))])
        >>> helper = injector.get(EC2Helper)
    """

    def __init__(self, defaults: AWSDefaults | None = None) -> None:
        self._defaults = defaults or AWSDefaults()

    @singleton
    @provider
    def provide_defaults(self) -> AWSDefaults:
        return self._defaults

    @singleton
    @provider
    def provide_session(self) -> boto3.Session:
        """Provide singleton boto3 session."""
        return boto3.Session()

    @singleton
    @provider
    def provide_helper(self, session: boto3.Session, defaults: AWSDefaults) -> EC2Helper:
        """Provide the EC2 helper bound to the configured region."""
        client = session.client("ec2", region_name=defaults.region)
        return EC2Helper(client, defaults)


__all__ = [
    "EC2Helper",
    "EC2Module",
    "create_describe_instances_tag",
    "ingress_permissions",
]
