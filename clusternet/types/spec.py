"""Declared (user-facing) dataclasses for cluster infrastructure.

These are the immutable objects that describe what the user wants.
A spec is read-only for the whole reconciliation pass; anything the
pass resolves or creates goes to ``InfraStatus`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from clusternet.constants import Arch, Protocol, Role


@dataclass(frozen=True, slots=True)
class ExportPort:
    """Ingress rule opened on the cluster security group.

    Args:
        protocol: ``tcp`` or ``udp``.
        cidr_ip: Source CIDR allowed in.
        from_port: First port of the range.
        to_port: Last port of the range. Defaults to ``from_port``.
    """

    protocol: Protocol = Protocol.TCP
    cidr_ip: str = "0.0.0.0/0"
    from_port: int = 22
    to_port: int | None = None

    @property
    def port_range(self) -> tuple[int, int]:
        return self.from_port, self.to_port if self.to_port is not None else self.from_port

    def __str__(self) -> str:
        start, end = self.port_range
        ports = str(start) if start == end else f"{start}-{end}"
        return f"{self.protocol}/{ports} from {self.cidr_ip}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExportPort:
        return cls(
            protocol=Protocol(data.get("protocol", Protocol.TCP)),
            cidr_ip=str(data.get("cidr_ip", "0.0.0.0/0")),
            from_port=int(data.get("from_port", 22)),
            to_port=int(data["to_port"]) if "to_port" in data else None,
        )


@dataclass(frozen=True, slots=True)
class NetworkSpec:
    """Network declaration, including resources the user wants reused.

    Any non-empty ``*_id`` wins over creation: the resource is adopted,
    recorded in status, and never deleted by teardown.
    """

    export_ports: tuple[ExportPort, ...] = ()
    vpc_id: str = ""
    subnet_id: str = ""
    security_group_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NetworkSpec:
        return cls(
            export_ports=tuple(ExportPort.from_dict(p) for p in data.get("export_ports", [])),
            vpc_id=str(data.get("vpc_id", "")),
            subnet_id=str(data.get("subnet_id", "")),
            security_group_id=str(data.get("security_group_id", "")),
        )


@dataclass(frozen=True, slots=True)
class HostGroup:
    """A group of identical hosts sharing roles and architecture."""

    roles: tuple[str, ...] = (Role.NODE,)
    count: int = 1
    arch: Arch = Arch.AMD64
    image: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HostGroup:
        return cls(
            roles=tuple(str(r) for r in data.get("roles", [Role.NODE])),
            count=int(data.get("count", 1)),
            arch=Arch(data.get("arch", Arch.AMD64)),
            image=str(data.get("image", "")),
        )


@dataclass(frozen=True, slots=True)
class InfraSpec:
    """User declaration for one cluster's infrastructure.

    Example:
        >>> spec = InfraSpec(
        ...     zone_ids=("use1-az1", "use1-az2"),
        ...     network=NetworkSpec(export_ports=(ExportPort(from_port=6443),)),
        ... )
    """

    zone_ids: tuple[str, ...] = ()
    network: NetworkSpec = field(default_factory=NetworkSpec)
    hosts: tuple[HostGroup, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InfraSpec:
        """Build a spec from a plain mapping (e.g. a parsed TOML table)."""
        return cls(
            zone_ids=tuple(str(z) for z in data.get("zone_ids", [])),
            network=NetworkSpec.from_dict(data.get("network", {})),
            hosts=tuple(HostGroup.from_dict(h) for h in data.get("hosts", [])),
        )
