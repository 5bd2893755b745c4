"""Idempotent provisioning of cluster networking on AWS.

Example:
    from clusternet import AWSProvider, resolve_infra

    infra, defaults = resolve_infra("demo")
    provider = AWSProvider.create(infra, defaults)
    provider.apply()
"""

from loguru import logger

from clusternet.config import load_config, resolve_infra
from clusternet.core.exceptions import (
    ClusterNetError,
    ConfigurationError,
    NotFoundError,
    PolicyError,
)
from clusternet.observability.logging import LogConfig, setup_logging, teardown_logging
from clusternet.providers.aws import AWSDefaults, AWSProvider
from clusternet.types import (
    ExportPort,
    HostGroup,
    HostStatus,
    Infra,
    InfraSpec,
    InfraStatus,
    NetworkSpec,
)

logger.disable("clusternet")

__all__ = [
    "AWSDefaults",
    "AWSProvider",
    "ClusterNetError",
    "ConfigurationError",
    "ExportPort",
    "HostGroup",
    "HostStatus",
    "Infra",
    "InfraSpec",
    "InfraStatus",
    "LogConfig",
    "NetworkSpec",
    "NotFoundError",
    "PolicyError",
    "load_config",
    "resolve_infra",
    "setup_logging",
    "teardown_logging",
]
