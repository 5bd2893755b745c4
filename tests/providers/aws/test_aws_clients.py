from __future__ import annotations

from clusternet.constants import Protocol
from clusternet.providers.aws import AWSDefaults, EC2Helper
from clusternet.providers.aws.clients import create_describe_instances_tag, ingress_permissions
from clusternet.types import ExportPort


class TestCreateDescribeInstancesTag:
    def test_one_filter_per_tag(self):
        assert create_describe_instances_tag({"product": "demo", "arch": "amd64"}) == [
            {"Name": "tag:product", "Values": ["demo"]},
            {"Name": "tag:arch", "Values": ["amd64"]},
        ]

    def test_empty(self):
        assert create_describe_instances_tag({}) == []


class TestIngressPermissions:
    def test_single_port(self):
        assert ingress_permissions([ExportPort(from_port=6443)]) == [
            {"IpProtocol": "tcp", "FromPort": 6443, "ToPort": 6443, "IpRanges": [{"CidrIp": "0.0.0.0/0"}]},
        ]

    def test_port_range(self):
        port = ExportPort(protocol=Protocol.UDP, cidr_ip="192.168.0.0/16", from_port=30000, to_port=32767)
        (permission,) = ingress_permissions([port])
        assert permission["IpProtocol"] == "udp"
        assert (permission["FromPort"], permission["ToPort"]) == (30000, 32767)
        assert permission["IpRanges"] == [{"CidrIp": "192.168.0.0/16"}]


class TestEC2Helper:
    def test_get_or_create_subnet_without_zone(self, fake_ec2):
        helper = EC2Helper(fake_ec2, AWSDefaults(subnet_cidr="10.1.0.0/24"))
        subnet = helper.get_or_create_subnet("vpc-1")

        assert subnet["SubnetId"] == "subnet-new"
        (request,) = fake_ec2.called("create_subnet")
        assert request["CidrBlock"] == "10.1.0.0/24"
        assert "AvailabilityZoneId" not in request

    def test_describe_subnets_scoped_to_vpc(self, fake_ec2):
        EC2Helper(fake_ec2, AWSDefaults()).get_or_create_subnet("vpc-1")
        (request,) = fake_ec2.called("describe_subnets")
        assert request["Filters"] == [{"Name": "vpc-id", "Values": ["vpc-1"]}]

    def test_bind_egress_gateway(self, fake_ec2):
        gateway_id = EC2Helper(fake_ec2, AWSDefaults()).bind_egress_gateway_to_vpc("vpc-1")

        assert gateway_id == "igw-new"
        (attach,) = fake_ec2.called("attach_internet_gateway")
        assert attach == {"InternetGatewayId": "igw-new", "VpcId": "vpc-1"}

    def test_authorize_reports_return_flag(self, fake_ec2):
        helper = EC2Helper(fake_ec2, AWSDefaults())
        ports = [ExportPort(from_port=22)]
        assert helper.authorize_security_group_ingress("sg-1", ports) is True

        fake_ec2.responses["authorize_security_group_ingress"] = {"Return": False}
        assert helper.authorize_security_group_ingress("sg-1", ports) is False

    def test_authorize_without_ports(self, fake_ec2):
        assert EC2Helper(fake_ec2, AWSDefaults()).authorize_security_group_ingress("sg-1", []) is True
        assert fake_ec2.calls == []

    def test_get_instance_infos_flattens_reservations(self, fake_ec2):
        fake_ec2.responses["describe_instances"] = {
            "Reservations": [
                {"Instances": [{"InstanceId": "i-1"}, {"InstanceId": "i-2"}]},
                {"Instances": [{"InstanceId": "i-3"}]},
                {},
            ],
        }
        infos = EC2Helper(fake_ec2, AWSDefaults()).get_instance_infos([])
        assert [i["InstanceId"] for i in infos] == ["i-1", "i-2", "i-3"]
