from __future__ import annotations

from collections.abc import Callable
from random import Random
from typing import Any

import pytest
from botocore.exceptions import ClientError

from clusternet.providers.aws import AWSDefaults, AWSProvider, EC2Helper
from clusternet.types import Infra, InfraSpec, InfraStatus


def _default_responses() -> dict[str, Any]:
    return {
        "create_vpc": {"Vpc": {"VpcId": "vpc-new"}},
        "describe_subnets": {"Subnets": []},
        "create_subnet": {"Subnet": {"SubnetId": "subnet-new", "AvailabilityZoneId": "use1-az1"}},
        "create_internet_gateway": {"InternetGateway": {"InternetGatewayId": "igw-new"}},
        "create_security_group": {"GroupId": "sg-new"},
        "authorize_security_group_ingress": {"Return": True},
        "describe_availability_zones": {
            "AvailabilityZones": [{"ZoneId": "use1-az1"}, {"ZoneId": "use1-az2"}],
        },
        "describe_instances": {"Reservations": []},
        "allocate_address": {"PublicIp": "54.0.0.1", "AllocationId": "eipalloc-1"},
        "associate_address": {"AssociationId": "eipassoc-1"},
        "describe_images": {"Images": []},
    }


class FakeEC2:
    """In-memory stand-in for a boto3 EC2 client.

    Records every call in order. Responses and failures are keyed by
    method name; any method without a canned response returns ``{}``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.responses: dict[str, Any] = _default_responses()
        self.failures: dict[str, Exception] = {}

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)

        def call(**kwargs: Any) -> Any:
            self.calls.append((name, kwargs))
            if name in self.failures:
                raise self.failures[name]
            return self.responses.get(name, {})

        return call

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def called(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for n, kwargs in self.calls if n == name]


def make_client_error(operation: str, code: str = "UnauthorizedOperation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{operation} denied"}}, operation)


@pytest.fixture
def fake_ec2() -> FakeEC2:
    return FakeEC2()


@pytest.fixture
def client_error() -> Callable[..., ClientError]:
    return make_client_error


@pytest.fixture
def make_provider(fake_ec2: FakeEC2) -> Callable[..., AWSProvider]:
    def _make(
        spec: InfraSpec | None = None,
        status: InfraStatus | None = None,
        *,
        name: str = "demo",
        defaults: AWSDefaults | None = None,
        seed: int = 0,
    ) -> AWSProvider:
        defaults = defaults or AWSDefaults()
        infra = Infra(name=name, spec=spec or InfraSpec(), status=status or InfraStatus())
        return AWSProvider(
            infra=infra,
            ec2=EC2Helper(fake_ec2, defaults),  # type: ignore[arg-type]
            defaults=defaults,
            rng=Random(seed),
        )

    return _make
