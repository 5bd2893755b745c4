"""AMI lookups used when launching cluster instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from clusternet.core.exceptions import NotFoundError

if TYPE_CHECKING:
    from .clients import EC2Helper

log = logger.bind(component="aws-ami")


def get_image_root_device_name(ec2: EC2Helper, ami_id: str) -> str:
    """Root device name of an AMI, needed for block device mappings.

    Args:
        ec2: EC2 helper to query with.
        ami_id: AMI ID to look up.

    Returns:
        Root device name (e.g. ``/dev/sda1``).

    Raises:
        NotFoundError: If the AMI does not exist.
    """
    response = ec2.svc.describe_images(ImageIds=[ami_id])
    images = response.get("Images", [])
    if not images:
        raise NotFoundError("image", ami_id)

    root_device_name: str = images[0]["RootDeviceName"]
    log.debug("AMI {ami_id} root device {device}", ami_id=ami_id, device=root_device_name)
    return root_device_name
