"""Instance provisioning — launches a SOCKS5 proxy node.

Cloud-agnostic: depends on the CloudProvider protocol.
"""

from __future__ import annotations

import logging

from proxy_control.core.interfaces import CloudProvider
from proxy_control.core.keys import KeyMaterialStore
from proxy_control.core.regions import ami_for_region
from proxy_control.core.resources import ensure_key_pair, ensure_security_group
from proxy_control.shared.config import INSTANCE_PROFILE_NAME, INSTANCE_TYPE, SECURITY_GROUP_PREFIX

logger = logging.getLogger(__name__)

SOCKS_PORT = 1080


def security_group_name(region: str) -> str:
    return f"{SECURITY_GROUP_PREFIX}{region}"


def create_instance(
    region: str,
    cloud: CloudProvider,
    key_store: KeyMaterialStore,
    key_name: str,
    ami_map: dict[str, str] | None = None,
) -> dict:
    """Launch one proxy instance in the region.

    May create the key pair and the security group as a side effect. The
    default VPC is not validated; a region without one fails at the
    security group step.

    Returns the launched instance descriptor.
    """
    image_id = ami_for_region(region, ami_map)

    vpc_id = cloud.default_vpc_id()
    ensure_key_pair(cloud, key_store, key_name)
    group_id = ensure_security_group(cloud, security_group_name(region), vpc_id)

    user_data = build_user_data()

    logger.info("Launching proxy instance in %s from %s", region, image_id)
    instance = cloud.run_instance(
        image_id=image_id,
        instance_type=INSTANCE_TYPE,
        key_name=key_name,
        security_group_ids=[group_id],
        user_data=user_data,
        instance_profile_name=INSTANCE_PROFILE_NAME,
    )
    logger.info("Launched %s in %s", instance.get("InstanceId"), region)
    return instance


def build_user_data(port: int = SOCKS_PORT) -> str:
    """Build the cloud-init script that installs and starts the dante SOCKS5 server."""
    return f"""#!/bin/bash
set -euo pipefail

yum install -y dante-server

IFACE=$(ip route show default | awk '{{print $5}}' | head -n1)

cat > /etc/sockd.conf << SOCKDEOF
logoutput: syslog
internal: 0.0.0.0 port = {port}
external: $IFACE
socksmethod: none
clientmethod: none
user.privileged: root
user.unprivileged: nobody

client pass {{
  from: 0.0.0.0/0 to: 0.0.0.0/0
}}

socks pass {{
  from: 0.0.0.0/0 to: 0.0.0.0/0
}}
SOCKDEOF

systemctl enable sockd
systemctl restart sockd
"""
