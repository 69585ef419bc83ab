"""Management-agent registration wait and proxy activation.

Cloud-agnostic: depends on the AgentInventory and CloudProvider protocols.
"""

from __future__ import annotations

import logging
import threading

from proxy_control.core.errors import OperationCancelled, OperationTimeout
from proxy_control.core.interfaces import AgentInventory, CloudProvider
from proxy_control.shared.config import AGENT_MAX_POLLS, AGENT_POLL_INTERVAL

logger = logging.getLogger(__name__)

STATUS_TAG = "Socks5"
STATUS_CREATED = "created"
STATUS_NOT_CREATED = "not created"


def wait_for_agent(
    instance_id: str,
    inventory: AgentInventory,
    interval: float = AGENT_POLL_INTERVAL,
    max_polls: int = AGENT_MAX_POLLS,
    cancel: threading.Event | None = None,
) -> None:
    """Poll the agent inventory until the instance registers.

    Returns on the first poll that lists the instance. Sleeps ``interval``
    seconds between polls on ``cancel``, so setting the event ends the wait
    early with OperationCancelled. Raises OperationTimeout after
    ``max_polls`` polls without a sighting.
    """
    cancel = cancel or threading.Event()

    for attempt in range(1, max_polls + 1):
        if cancel.is_set():
            raise OperationCancelled(f"Agent wait for {instance_id} cancelled", instance_id)

        if instance_id in inventory.registered_instance_ids():
            logger.info("Instance %s registered with agent after %d poll(s)", instance_id, attempt)
            return

        logger.debug("Instance %s not registered yet (poll %d/%d)", instance_id, attempt, max_polls)
        if attempt < max_polls and cancel.wait(interval):
            raise OperationCancelled(f"Agent wait for {instance_id} cancelled", instance_id)

    raise OperationTimeout(f"Instance {instance_id} did not register with the agent service", instance_id)


def activate_proxy(
    instance_id: str,
    cloud: CloudProvider,
    inventory: AgentInventory,
    cancel: threading.Event | None = None,
    **wait_kwargs,
) -> dict:
    """Wait for the agent, then mark the instance's proxy as created.

    A tagging failure after a successful wait is not rolled back.
    """
    wait_for_agent(instance_id, inventory, cancel=cancel, **wait_kwargs)
    cloud.create_tags(instance_id, {STATUS_TAG: STATUS_CREATED})
    logger.info("Proxy activated on %s", instance_id)
    return {"success": True, "instance_id": instance_id, "socks5_status": STATUS_CREATED}
