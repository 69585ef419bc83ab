"""Idempotent ensure-or-create for the key pair and security group.

Cloud-agnostic: depends on the CloudProvider protocol.
"""

from __future__ import annotations

import logging
import threading

from proxy_control.core.errors import DuplicateResource, ProviderError, ResourceNotFound
from proxy_control.core.interfaces import CloudProvider
from proxy_control.core.keys import KeyMaterialStore

logger = logging.getLogger(__name__)

ALLOW_ALL_PERMISSIONS = [{"IpProtocol": "-1", "IpRanges": [{"CidrIp": "0.0.0.0/0"}]}]
SECURITY_GROUP_DESCRIPTION = "Allow all traffic"

_key_locks: dict[str, threading.Lock] = {}
_key_locks_guard = threading.Lock()


def _lock_for(key_name: str) -> threading.Lock:
    with _key_locks_guard:
        return _key_locks.setdefault(key_name, threading.Lock())


def ensure_key_pair(cloud: CloudProvider, key_store: KeyMaterialStore, key_name: str) -> str:
    """Make sure the remote key pair and the local key file both exist.

    The two halves are treated as one unit: if either is missing, the remote
    record is replaced and the new material written locally. Calls for the
    same key name are serialized within this process; other processes
    sharing the key name are not coordinated.

    Returns the key name.
    """
    with _lock_for(key_name):
        try:
            cloud.describe_key_pair(key_name)
            exists_remotely = True
        except ResourceNotFound:
            exists_remotely = False

        exists_locally = key_store.exists(key_name)

        if exists_remotely and exists_locally:
            return key_name

        logger.info(
            "Regenerating key pair %s in %s (remote=%s, local=%s)",
            key_name,
            cloud.region,
            exists_remotely,
            exists_locally,
        )
        if exists_remotely:
            cloud.delete_key_pair(key_name)

        material = cloud.create_key_pair(key_name)
        key_store.write(key_name, material)

    return key_name


def ensure_security_group(cloud: CloudProvider, group_name: str, vpc_id: str | None) -> str:
    """Find or create an allow-all security group and apply its rules.

    Returns the group id.
    """
    try:
        group_id = cloud.find_security_group(group_name, vpc_id)
    except ProviderError as exc:
        if not isinstance(exc, ResourceNotFound):
            logger.warning("Security group lookup for %s failed, creating: %s", group_name, exc)
        group_id = cloud.create_security_group(group_name, SECURITY_GROUP_DESCRIPTION, vpc_id)
        logger.info("Created security group %s (%s) in %s", group_name, group_id, cloud.region)

    try:
        cloud.authorize_ingress(group_id, ALLOW_ALL_PERMISSIONS)
    except DuplicateResource:
        pass

    try:
        cloud.authorize_egress(group_id, ALLOW_ALL_PERMISSIONS)
    except DuplicateResource:
        pass

    return group_id
