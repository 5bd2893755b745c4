"""AWS provider: owns one cluster's infra and sequences lifecycle steps."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from random import Random

from injector import Injector
from loguru import logger

from clusternet.constants import Role
from clusternet.types import Infra

from .clients import EC2Helper, EC2Module
from .config import AWSDefaults
from .fields import EIP_ID

log = logger.bind(component="aws-provider")

type Step = tuple[str, Callable[[], None]]
type BootHook = Callable[[AWSProvider], None]


@dataclass(slots=True)
class AWSProvider:
    """Provisions and tears down networking for one cluster on AWS.

    The provider is not thread-safe. One reconciliation pass at a time may
    run against a given ``Infra``; callers must serialize passes per cluster
    and persist ``infra.status`` after each successful one.

    Example:
        >>> from clusternet.providers.aws import AWSProvider
        >>> from clusternet.types import Infra
        >>>
        >>> provider = AWSProvider.create(Infra(name="demo"))
        >>> provider.apply()
        >>> provider.infra.status.cluster.vpc_id
        'vpc-0123456789abcdef0'

    Args:
        infra: Spec and status of the cluster. Status is mutated in place.
        ec2: EC2 client wrapper.
        defaults: CIDRs, tags and naming used for created resources.
        rng: Random source for zone selection and security group names.
    """

    infra: Infra
    ec2: EC2Helper
    defaults: AWSDefaults = field(default_factory=AWSDefaults)
    rng: Random = field(default_factory=Random, repr=False)

    @classmethod
    def create(
        cls,
        infra: Infra,
        defaults: AWSDefaults | None = None,
        rng: Random | None = None,
    ) -> AWSProvider:
        """Build a provider with a real boto3 EC2 client."""
        injector = Injector([EC2Module(defaults)])
        return cls(
            infra=infra,
            ec2=injector.get(EC2Helper),
            defaults=injector.get(AWSDefaults),
            rng=rng or Random(),
        )

    @property
    def name(self) -> str:
        """Provider name."""
        return "aws"

    # -------------------------------------------------------------------------
    # Lifecycle operations
    # -------------------------------------------------------------------------

    def create_vpc(self) -> None:
        from .lifecycle import create_vpc
        create_vpc(self)

    def delete_vpc(self) -> None:
        from .lifecycle import delete_vpc
        delete_vpc(self)

    def delete_subnet(self) -> None:
        from .lifecycle import delete_subnet
        delete_subnet(self)

    def delete_egress_gateway(self) -> None:
        from .lifecycle import delete_egress_gateway
        delete_egress_gateway(self)

    def create_security_group(self) -> None:
        from .lifecycle import create_security_group
        create_security_group(self)

    def delete_security_group(self) -> None:
        from .lifecycle import delete_security_group
        delete_security_group(self)

    def get_available_zone_id(self) -> None:
        from .lifecycle import get_available_zone_id
        get_available_zone_id(self)

    def bind_eip_for_master0(self) -> None:
        from .lifecycle import bind_eip_for_master0
        bind_eip_for_master0(self)

    def release_eip_address(self) -> None:
        from .lifecycle import release_eip_address
        release_eip_address(self)

    def get_image_root_device_name(self, ami_id: str) -> str:
        from .ami import get_image_root_device_name
        return get_image_root_device_name(self.ec2, ami_id)

    # -------------------------------------------------------------------------
    # Sequencing
    # -------------------------------------------------------------------------

    def apply(self, boot_instances: BootHook | None = None) -> None:
        """Bring the cluster network up.

        Order: zone, VPC (with subnet and gateway), security group, then
        ``boot_instances`` (instance creation lives outside this package),
        then the master's elastic IP. The EIP step runs once a master host
        shows up in status and is skipped when an EIP is already recorded.

        Raises:
            The first error of any step, unchanged. Earlier steps are not
            undone.
        """
        self._run([
            ("zone", self.get_available_zone_id),
            ("vpc", self.create_vpc),
            ("security_group", self.create_security_group),
        ])

        if boot_instances is not None:
            self._run([("boot_instances", lambda: boot_instances(self))])

        status = self.infra.status
        has_master = any(h.has_role(Role.MASTER) for h in status.hosts)
        if has_master and not EIP_ID.value(status):
            self._run([("eip", self.bind_eip_for_master0)])

    def teardown(self) -> None:
        """Tear the cluster network down in reverse dependency order.

        Steps whose resource was never recorded are skipped, so teardown
        after a partially failed ``apply`` only touches what exists.
        """
        self._run([
            ("eip", self.release_eip_address),
            ("security_group", self.delete_security_group),
            ("egress_gateway", self.delete_egress_gateway),
            ("subnet", self.delete_subnet),
            ("vpc", self.delete_vpc),
        ])

    def _run(self, steps: Sequence[Step]) -> None:
        cluster_log = log.bind(cluster=self.infra.name)
        for step_name, step in steps:
            cluster_log.debug("{step} starting", step=step_name)
            try:
                step()
            except Exception as e:
                cluster_log.error(
                    "{step} failed for cluster {cluster}: {error}",
                    step=step_name, cluster=self.infra.name, error=e,
                )
                raise
            cluster_log.debug("{step} done", step=step_name)
