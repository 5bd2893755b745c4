"""Centralized constants and enums for clusternet.

All magic strings and provider codes are defined here to ensure
consistency and enable type-safe usage throughout the codebase.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Final

# =============================================================================
# AWS Resource Tags
# =============================================================================


class ClusterTag(StrEnum):
    """AWS resource tag keys used to find cluster instances."""

    PRODUCT = "product"
    ROLE = "role"
    ARCH = "arch"


# =============================================================================
# EC2 Instance States
# =============================================================================


class InstanceStateCode(IntEnum):
    """EC2 instance state codes (low byte of ``State.Code``)."""

    PENDING = 0
    RUNNING = 16
    SHUTTING_DOWN = 32
    TERMINATED = 48
    STOPPING = 64
    STOPPED = 80


# =============================================================================
# Host Roles and Architectures
# =============================================================================


class Role(StrEnum):
    MASTER = "master"
    NODE = "node"


class Arch(StrEnum):
    AMD64 = "amd64"
    ARM64 = "arm64"
    X86_64 = "x86_64"


class Protocol(StrEnum):
    TCP = "tcp"
    UDP = "udp"


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_REGION: Final = "us-east-1"
DEFAULT_VPC_CIDR: Final = "10.0.0.0/16"
DEFAULT_SUBNET_CIDR: Final = "10.0.0.0/24"
DEFAULT_TAG_KEY: Final = "clusternet:managed"
DEFAULT_TAG_VALUE: Final = "true"
DEFAULT_SECURITY_GROUP_PREFIX: Final = "clusternet"
DEFAULT_SECURITY_GROUP_DESCRIPTION: Final = "clusternet security group"
SECURITY_GROUP_SUFFIX_LENGTH: Final = 8
