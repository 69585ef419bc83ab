"""Launch-permission fan-out for the proxy AMI across every mapped region."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from proxy_control.core.interfaces import CloudProvider
from proxy_control.core.regions import AMI_MAP

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


def grant_to_account(
    account_id: str,
    cloud_factory: Callable[[str], CloudProvider],
    catalog: dict[str, str] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[dict]:
    """Grant ``account_id`` launch permission on the AMI of every region.

    Regions are attempted independently; a failure in one is recorded and
    never stops the others. ``cloud_factory(region)`` decides which
    credentials each region's client uses.

    Returns one result per region, in catalog order.
    """
    catalog = AMI_MAP if catalog is None else catalog

    def grant(region: str, ami_id: str) -> dict:
        try:
            cloud_factory(region).add_launch_permission(ami_id, account_id)
        except Exception as exc:
            logger.warning("Granting %s on %s in %s failed: %s", account_id, ami_id, region, exc)
            return {"region": region, "ami_id": ami_id, "status": "failed", "error": str(exc)}
        return {"region": region, "ami_id": ami_id, "status": "success"}

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        futures = [pool.submit(grant, region, ami_id) for region, ami_id in catalog.items()]
        results = [future.result() for future in futures]

    succeeded = sum(1 for r in results if r["status"] == "success")
    logger.info("Granted %s launch permission in %d/%d regions", account_id, succeeded, len(results))
    return results
