"""Instance listing and termination.

Cloud-agnostic: depends on the CloudProvider protocol.
"""

from __future__ import annotations

import logging

from proxy_control.core.agent import STATUS_NOT_CREATED, STATUS_TAG
from proxy_control.core.interfaces import CloudProvider

logger = logging.getLogger(__name__)


def _socks5_status(instance: dict) -> str:
    for tag in instance.get("Tags") or []:
        if tag.get("Key") == STATUS_TAG:
            return tag.get("Value") or STATUS_NOT_CREATED
    return STATUS_NOT_CREATED


def summarize_instance(instance: dict) -> dict:
    return {
        "instance_id": instance["InstanceId"],
        "state": instance.get("State", {}).get("Name", ""),
        "public_ip": instance.get("PublicIpAddress", ""),
        "security_groups": [
            {"group_id": sg.get("GroupId"), "group_name": sg.get("GroupName")}
            for sg in instance.get("SecurityGroups") or []
        ],
        "socks5_status": _socks5_status(instance),
    }


def list_instances(cloud: CloudProvider) -> list[dict]:
    """List every instance in the region with its proxy activation status."""
    return [summarize_instance(inst) for inst in cloud.describe_instances()]


def terminate(instance_id: str, cloud: CloudProvider) -> list[dict]:
    """Terminate an instance and wait for it to reach the terminated state.

    Steps run in order and are not rolled back: a failure after the tag is
    deleted leaves a running instance reported as "not created".

    Returns the refreshed instance list, without the terminated instance.
    """
    cloud.delete_tags(instance_id, [STATUS_TAG])
    cloud.terminate_instance(instance_id)
    logger.info("Terminating %s in %s", instance_id, cloud.region)
    cloud.wait_until_terminated(instance_id)
    logger.info("Instance %s terminated", instance_id)
    return [inst for inst in list_instances(cloud) if inst["instance_id"] != instance_id]
