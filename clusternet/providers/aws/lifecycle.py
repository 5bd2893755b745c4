"""Create/delete operations for AWS networking resources.

Every create consults the ``InfraSpec`` first and adopts a user-declared resource
instead of creating one. Every delete reads the identifier recorded in
status and clears it once the resource is gone. User-declared resources
are left alone.

Multi-step operations stop at the first failing request and do not undo
the steps that already succeeded. A VPC whose subnet creation failed, or
an address that was allocated but never associated, stays in the account
until teardown or an operator removes it. Re-running the create after
cleanup is expected to work.
"""

from __future__ import annotations

import string
from random import Random
from typing import TYPE_CHECKING, Any

from loguru import logger

from clusternet.constants import SECURITY_GROUP_SUFFIX_LENGTH, ClusterTag, InstanceStateCode
from clusternet.core.exceptions import NotFoundError, PolicyError

from .clients import create_describe_instances_tag
from .fields import (
    EGRESS_GATEWAY_ID,
    EIP_ASSOCIATION_ID,
    EIP_ID,
    SECURITY_GROUP_ID,
    SUBNET_ID,
    SUBNET_ZONE_ID,
    VPC_ID,
)

if TYPE_CHECKING:
    from .provider import AWSProvider

log = logger.bind(component="aws-lifecycle")

_NAME_ALPHABET = string.ascii_lowercase + string.digits


def rand_security_group_name(rng: Random, length: int = SECURITY_GROUP_SUFFIX_LENGTH) -> str:
    """Random lowercase alphanumeric suffix for security group names."""
    return "".join(rng.choice(_NAME_ALPHABET) for _ in range(length))


# =============================================================================
# VPC
# =============================================================================


def create_vpc(provider: AWSProvider) -> None:
    """Create the cluster VPC with its subnet and egress gateway.

    A VPC ID declared in ``InfraSpec`` is recorded as-is and nothing is created.
    Otherwise each of VPC, subnet and gateway is created only if status does
    not already record it, so a pass that failed half-way can be resumed.
    """
    spec, status = provider.infra.spec, provider.infra.status

    if vpc_id := VPC_ID.cluster_value(spec):
        VPC_ID.set_value(status, vpc_id)
        if subnet_id := SUBNET_ID.cluster_value(spec):
            SUBNET_ID.set_value(status, subnet_id)
        log.debug("VpcID using default value {vpc_id}", vpc_id=vpc_id)
        return

    vpc_id = VPC_ID.value(status)
    if not vpc_id:
        defaults = provider.defaults
        response = provider.ec2.svc.create_vpc(
            CidrBlock=defaults.vpc_cidr,
            TagSpecifications=defaults.tag_specifications("vpc"),
        )
        vpc_id = response["Vpc"]["VpcId"]
        VPC_ID.set_value(status, vpc_id)
        log.info("Created VPC {vpc_id} ({cidr})", vpc_id=vpc_id, cidr=defaults.vpc_cidr)

    if not SUBNET_ID.value(status):
        subnet = provider.ec2.get_or_create_subnet(vpc_id, status.cluster.zone_id)
        SUBNET_ID.set_value(status, subnet["SubnetId"])
        SUBNET_ZONE_ID.set_value(status, subnet.get("AvailabilityZoneId", ""))

    if not EGRESS_GATEWAY_ID.value(status):
        gateway_id = provider.ec2.bind_egress_gateway_to_vpc(vpc_id)
        EGRESS_GATEWAY_ID.set_value(status, gateway_id)


def delete_vpc(provider: AWSProvider) -> None:
    """Delete the recorded VPC and clear it from status.

    No-op when status records no VPC. A VPC that is both declared in
    ``InfraSpec`` and recorded in status is left alone.
    """
    spec, status = provider.infra.spec, provider.infra.status
    vpc_id = VPC_ID.value(status)
    if not vpc_id:
        return
    if VPC_ID.is_externally_owned(spec, status):
        log.debug("VPC {vpc_id} is user-declared, not deleting", vpc_id=vpc_id)
        return

    provider.ec2.svc.delete_vpc(VpcId=vpc_id)
    VPC_ID.set_value(status, "")
    log.info("Deleted VPC {vpc_id}", vpc_id=vpc_id)


def delete_subnet(provider: AWSProvider) -> None:
    """Delete the subnet ``create_vpc`` made. No-op if none was recorded.

    A subnet is only adopted together with a declared VPC, so ownership
    follows the VPC.
    """
    spec, status = provider.infra.spec, provider.infra.status
    subnet_id = SUBNET_ID.value(status)
    if not subnet_id:
        return
    if VPC_ID.is_externally_owned(spec, status):
        log.debug("Subnet {subnet_id} is user-declared, not deleting", subnet_id=subnet_id)
        return

    provider.ec2.svc.delete_subnet(SubnetId=subnet_id)
    SUBNET_ID.set_value(status, "")
    SUBNET_ZONE_ID.set_value(status, "")
    log.info("Deleted subnet {subnet_id}", subnet_id=subnet_id)


def delete_egress_gateway(provider: AWSProvider) -> None:
    """Detach and delete the gateway ``create_vpc`` made. No-op if none was recorded."""
    spec, status = provider.infra.spec, provider.infra.status
    gateway_id = EGRESS_GATEWAY_ID.value(status)
    if not gateway_id or VPC_ID.is_externally_owned(spec, status):
        return

    vpc_id = VPC_ID.value(status)
    provider.ec2.svc.detach_internet_gateway(InternetGatewayId=gateway_id, VpcId=vpc_id)
    provider.ec2.svc.delete_internet_gateway(InternetGatewayId=gateway_id)
    EGRESS_GATEWAY_ID.set_value(status, "")
    log.info("Deleted gateway {gateway_id}", gateway_id=gateway_id)


# =============================================================================
# Security Group
# =============================================================================


def create_security_group(provider: AWSProvider) -> None:
    """Create the cluster security group and open the export ports.

    Raises:
        PolicyError: EC2 refused the ingress rules. The group itself has
            already been created and is not recorded in status.
    """
    spec, status = provider.infra.spec, provider.infra.status

    if security_group_id := SECURITY_GROUP_ID.cluster_value(spec):
        log.debug("SecurityGroupID using default value {group_id}", group_id=security_group_id)
        SECURITY_GROUP_ID.set_value(status, security_group_id)
        return
    if SECURITY_GROUP_ID.value(status):
        return

    defaults = provider.defaults
    name = f"{defaults.security_group_prefix}-{rand_security_group_name(provider.rng)}"
    response = provider.ec2.svc.create_security_group(
        Description=defaults.security_group_description,
        VpcId=VPC_ID.value(status),
        GroupName=name,
        TagSpecifications=defaults.tag_specifications("security-group"),
    )
    group_id = response["GroupId"]

    ports = spec.network.export_ports
    if not provider.ec2.authorize_security_group_ingress(group_id, ports):
        raise PolicyError(
            "security group",
            group_id,
            f"authorize ports {[str(p) for p in ports]} failed",
        )
    SECURITY_GROUP_ID.set_value(status, group_id)
    log.info("Created security group {group_id} ({name})", group_id=group_id, name=name)


def delete_security_group(provider: AWSProvider) -> None:
    """Delete the recorded security group and clear it from status.

    No-op when status records no group. A group that is both declared in
    ``InfraSpec`` and recorded in status is left alone.
    """
    spec, status = provider.infra.spec, provider.infra.status
    group_id = SECURITY_GROUP_ID.value(status)
    if not group_id or SECURITY_GROUP_ID.is_externally_owned(spec, status):
        return

    provider.ec2.svc.delete_security_group(GroupId=group_id)
    SECURITY_GROUP_ID.set_value(status, "")
    log.info("Deleted security group {group_id}", group_id=group_id)


# =============================================================================
# Availability Zone
# =============================================================================


def get_available_zone_id(provider: AWSProvider) -> None:
    """Pick the cluster's availability zone once and keep it.

    Candidates come from ``InfraSpec.zone_ids`` when it lists any, otherwise from every
    zone of the configured region. Selection is uniform random.

    Raises:
        NotFoundError: The region reports no zones.
    """
    spec, status = provider.infra.spec, provider.infra.status
    if status.cluster.zone_id:
        log.debug("zoneID using status value {zone_id}", zone_id=status.cluster.zone_id)
        return

    if spec.zone_ids:
        status.cluster.zone_id = provider.rng.choice(spec.zone_ids)
    else:
        region = provider.defaults.region
        response = provider.ec2.svc.describe_availability_zones(
            Filters=[{"Name": "region-name", "Values": [region]}],
        )
        zones = response.get("AvailabilityZones", [])
        if not zones:
            raise NotFoundError("availability zone", region, "not available ZoneID")
        status.cluster.zone_id = provider.rng.choice(zones)["ZoneId"]

    log.info("Selected zone {zone_id}", zone_id=status.cluster.zone_id)


# =============================================================================
# Elastic IP
# =============================================================================


def bind_eip_for_master0(provider: AWSProvider) -> None:
    """Give the first ready master a public elastic IP.

    Raises:
        NotFoundError: No ready master host, or no running instance for it.
    """
    infra = provider.infra
    status = infra.status

    host = status.ready_master()
    if host is None:
        raise NotFoundError("ready master host", infra.name, "bind eip for master")

    filters = create_describe_instances_tag({
        ClusterTag.PRODUCT: infra.name,
        ClusterTag.ROLE: ",".join(host.roles),
        ClusterTag.ARCH: str(host.arch),
    })
    instances = provider.ec2.get_instance_infos(filters)
    master0 = next(
        (i for i in instances if i["State"]["Code"] == InstanceStateCode.RUNNING),
        None,
    )
    if master0 is None:
        raise NotFoundError("running instance", infra.name, f"{len(instances)} matched, none running")

    eip, allocation_id = _allocate_eip_address(provider)
    association_id = _associate_eip_address(provider, master0["InstanceId"], allocation_id)

    status.cluster.eip = eip
    EIP_ID.set_value(status, allocation_id)
    EIP_ASSOCIATION_ID.set_value(status, association_id)
    status.cluster.master0_id = master0["InstanceId"]
    status.cluster.master0_internal_ip = master0["PrivateIpAddress"]


def _allocate_eip_address(provider: AWSProvider) -> tuple[str, str]:
    response = provider.ec2.svc.allocate_address(Domain="vpc")
    log.info(
        "Allocated EIP {eip} ({allocation_id})",
        eip=response["PublicIp"], allocation_id=response["AllocationId"],
    )
    return response["PublicIp"], response["AllocationId"]


def _associate_eip_address(provider: AWSProvider, instance_id: str, allocation_id: str) -> str:
    response: dict[str, Any] = provider.ec2.svc.associate_address(
        InstanceId=instance_id,
        AllocationId=allocation_id,
    )
    association_id = response.get("AssociationId", "")
    log.info(
        "Associated {allocation_id} with {instance_id}",
        allocation_id=allocation_id, instance_id=instance_id,
    )
    return association_id


def _disassociate_eip_address(provider: AWSProvider) -> None:
    status = provider.infra.status
    association_id = EIP_ASSOCIATION_ID.value(status)
    if not association_id:
        return
    provider.ec2.svc.disassociate_address(AssociationId=association_id)
    EIP_ASSOCIATION_ID.set_value(status, "")
    log.info("Disassociated {association_id}", association_id=association_id)


def release_eip_address(provider: AWSProvider) -> None:
    """Disassociate then release the master's elastic IP.

    Release is only attempted once disassociation succeeded. Each step
    clears what it removed from status, so a retried teardown picks up
    where the failed one stopped.
    """
    status = provider.infra.status
    allocation_id = EIP_ID.value(status)
    if not allocation_id:
        log.debug("No EIP recorded, nothing to release")
        return

    _disassociate_eip_address(provider)
    provider.ec2.svc.release_address(AllocationId=allocation_id)
    EIP_ID.set_value(status, "")
    status.cluster.eip = ""
    status.cluster.master0_id = ""
    status.cluster.master0_internal_ip = ""
    log.info("Released EIP {allocation_id}", allocation_id=allocation_id)
