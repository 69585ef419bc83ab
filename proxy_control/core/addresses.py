"""Elastic IP reassignment and release.

Cloud-agnostic: depends on the CloudProvider protocol.
"""

from __future__ import annotations

import logging

from proxy_control.core.errors import ProviderError
from proxy_control.core.interfaces import CloudProvider

logger = logging.getLogger(__name__)


def reassign_address(instance_id: str, cloud: CloudProvider) -> str:
    """Move an instance onto a freshly allocated elastic IP.

    The new address is associated before the old one is released, so the
    instance always has an address. If association fails, the new
    allocation is released and the original error re-raised.

    Returns the new public IP.
    """
    allocation = cloud.allocate_address()
    new_allocation_id = allocation["allocation_id"]
    logger.info("Allocated %s (%s) for %s", allocation["public_ip"], new_allocation_id, instance_id)

    try:
        old_allocation_id = cloud.find_instance_address(instance_id)
        cloud.associate_address(new_allocation_id, instance_id)
    except ProviderError:
        logger.exception("Failed to associate %s with %s, releasing it", new_allocation_id, instance_id)
        try:
            cloud.release_address(new_allocation_id)
        except ProviderError:
            logger.exception("Could not release orphaned allocation %s", new_allocation_id)
        raise

    if old_allocation_id and old_allocation_id != new_allocation_id:
        try:
            cloud.release_address(old_allocation_id)
        except ProviderError:
            logger.exception(
                "%s now uses %s but previous allocation %s could not be released",
                instance_id,
                new_allocation_id,
                old_allocation_id,
            )
            raise
        logger.info("Released previous allocation %s from %s", old_allocation_id, instance_id)

    return allocation["public_ip"]


def release_address(allocation_id: str, cloud: CloudProvider) -> None:
    """Release an elastic IP. The provider rejects unknown or still-associated addresses."""
    cloud.release_address(allocation_id)
    logger.info("Released allocation %s in %s", allocation_id, cloud.region)
