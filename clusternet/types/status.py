"""Mutable status records for cluster infrastructure.

Status accumulates identifiers as create operations succeed, and is the
only source delete operations read from. Persisting it between passes is
the caller's job; ``to_dict``/``from_dict`` exist for that.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

from clusternet.constants import Arch, Role
from clusternet.types.spec import InfraSpec


@dataclass(slots=True)
class HostStatus:
    """Observed state of one host group."""

    roles: list[str] = field(default_factory=list)
    arch: Arch = Arch.AMD64
    ready: bool = False
    ips: list[str] = field(default_factory=list)
    instance_ids: list[str] = field(default_factory=list)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_ready_master(self) -> bool:
        return self.ready and self.has_role(Role.MASTER)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HostStatus:
        return cls(
            roles=[str(r) for r in data.get("roles", [])],
            arch=Arch(data.get("arch", Arch.AMD64)),
            ready=bool(data.get("ready", False)),
            ips=[str(ip) for ip in data.get("ips", [])],
            instance_ids=[str(i) for i in data.get("instance_ids", [])],
        )


@dataclass(slots=True)
class ClusterStatus:
    """Identifiers of cluster-wide resources. Empty string means unset."""

    zone_id: str = ""
    vpc_id: str = ""
    subnet_id: str = ""
    subnet_zone_id: str = ""
    security_group_id: str = ""
    egress_gateway_id: str = ""
    eip_id: str = ""
    eip_association_id: str = ""
    eip: str = ""
    master0_id: str = ""
    master0_internal_ip: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClusterStatus:
        known = {f.name for f in fields(cls)}
        return cls(**{k: str(v) for k, v in data.items() if k in known})


@dataclass(slots=True)
class InfraStatus:
    """Mutable, persisted record of resolved and created resources."""

    cluster: ClusterStatus = field(default_factory=ClusterStatus)
    hosts: list[HostStatus] = field(default_factory=list)

    def ready_master(self) -> HostStatus | None:
        """First host group that carries the master role and is ready."""
        return next((h for h in self.hosts if h.is_ready_master), None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InfraStatus:
        """Deserialize from dictionary."""
        return cls(
            cluster=ClusterStatus.from_dict(data.get("cluster", {})),
            hosts=[HostStatus.from_dict(h) for h in data.get("hosts", [])],
        )


@dataclass(slots=True)
class Infra:
    """A named cluster: its declared spec plus the status it has reached."""

    name: str
    spec: InfraSpec = field(default_factory=InfraSpec)
    status: InfraStatus = field(default_factory=InfraStatus)
