"""Custom exception hierarchy for clusternet.

All clusternet-specific exceptions inherit from ClusterNetError, enabling
users to catch all of them with a single except clause. Failures returned
by the EC2 API itself surface as ``botocore.exceptions.ClientError`` and
are never wrapped.
"""

from __future__ import annotations


class ClusterNetError(Exception):
    """Base exception for all clusternet errors."""


class NotFoundError(ClusterNetError):
    """Raised when a required resource does not exist.

    Covers images, availability zones, running instances and ready
    master hosts.
    """

    def __init__(self, resource: str, identifier: str = "", detail: str = "") -> None:
        self.resource = resource
        self.identifier = identifier
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class PolicyError(ClusterNetError):
    """Raised when the provider answers an allowed action with a negative result."""

    def __init__(self, resource: str, identifier: str, detail: str) -> None:
        self.resource = resource
        self.identifier = identifier
        self.detail = detail
        super().__init__(f"{resource} {identifier}: {detail}")


class ConfigurationError(ClusterNetError):
    """Raised for invalid configuration or missing required settings."""
