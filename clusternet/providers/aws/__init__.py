"""AWS EC2 networking provider for clusternet.

Example:
    from clusternet.providers.aws import AWSProvider
    from clusternet.types import Infra, InfraSpec

    provider = AWSProvider.create(Infra(name="demo", spec=InfraSpec(zone_ids=("use1-az1",))))
    provider.apply()
"""

from clusternet.providers.aws.clients import EC2Helper, EC2Module
from clusternet.providers.aws.config import AWSDefaults
from clusternet.providers.aws.provider import AWSProvider

__all__ = ["AWSDefaults", "AWSProvider", "EC2Helper", "EC2Module"]
