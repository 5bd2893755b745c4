from __future__ import annotations

from clusternet.constants import Arch, Protocol, Role
from clusternet.types import (
    ClusterStatus,
    ExportPort,
    HostGroup,
    HostStatus,
    InfraSpec,
    InfraStatus,
)


class TestExportPort:
    def test_single_port_range(self):
        assert ExportPort(from_port=80).port_range == (80, 80)

    def test_str(self):
        assert str(ExportPort(from_port=80)) == "tcp/80 from 0.0.0.0/0"
        assert str(ExportPort(protocol=Protocol.UDP, from_port=1, to_port=9)) == "udp/1-9 from 0.0.0.0/0"


class TestInfraSpecFromDict:
    def test_full(self):
        spec = InfraSpec.from_dict({
            "zone_ids": ["z1", "z2"],
            "network": {
                "vpc_id": "vpc-1",
                "export_ports": [{"protocol": "udp", "from_port": 53}],
            },
            "hosts": [{"roles": ["master"], "count": 3, "arch": "arm64"}],
        })
        assert spec.zone_ids == ("z1", "z2")
        assert spec.network.vpc_id == "vpc-1"
        assert spec.network.security_group_id == ""
        assert spec.network.export_ports == (ExportPort(protocol=Protocol.UDP, from_port=53),)
        assert spec.hosts == (HostGroup(roles=("master",), count=3, arch=Arch.ARM64),)

    def test_empty(self):
        assert InfraSpec.from_dict({}) == InfraSpec()


class TestInfraStatus:
    def test_round_trip(self):
        status = InfraStatus(
            cluster=ClusterStatus(vpc_id="vpc-1", zone_id="z1", eip="1.2.3.4"),
            hosts=[HostStatus(roles=["master"], arch=Arch.ARM64, ready=True, ips=["10.0.0.1"])],
        )
        assert InfraStatus.from_dict(status.to_dict()) == status

    def test_from_dict_ignores_unknown_cluster_keys(self):
        status = InfraStatus.from_dict({"cluster": {"vpc_id": "vpc-1", "legacy": "x"}})
        assert status.cluster == ClusterStatus(vpc_id="vpc-1")

    def test_ready_master(self):
        node = HostStatus(roles=[Role.NODE], ready=True)
        idle = HostStatus(roles=[Role.MASTER], ready=False)
        ready = HostStatus(roles=[Role.MASTER, Role.NODE], ready=True)
        assert InfraStatus(hosts=[node, idle, ready]).ready_master() is ready
        assert InfraStatus(hosts=[node, idle]).ready_master() is None
