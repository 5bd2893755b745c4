"""Infrastructure data model: immutable spec, mutable status."""

from clusternet.types.spec import (
    ExportPort,
    HostGroup,
    InfraSpec,
    NetworkSpec,
)
from clusternet.types.status import (
    ClusterStatus,
    HostStatus,
    Infra,
    InfraStatus,
)

__all__ = [
    "ClusterStatus",
    "ExportPort",
    "HostGroup",
    "HostStatus",
    "Infra",
    "InfraSpec",
    "InfraStatus",
    "NetworkSpec",
]
