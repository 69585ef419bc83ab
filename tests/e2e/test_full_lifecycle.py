"""E2E lifecycle test using mock backends end to end."""

from __future__ import annotations

from proxy_control.backends.mock.agent import MockAgentInventory
from proxy_control.backends.mock.cloud import InMemoryCloud
from proxy_control.core import addresses, agent, instances, provisioner
from proxy_control.core.keys import KeyMaterialStore


def test_create_activate_reassign_and_terminate(tmp_path):
    cloud = InMemoryCloud(region="eu-central-1")
    key_store = KeyMaterialStore(tmp_path / "keys")

    launched = provisioner.create_instance("eu-central-1", cloud, key_store, "ads-global-key")
    instance_id = launched["InstanceId"]
    cloud.instances[instance_id]["State"] = {"Name": "running"}

    [listed] = instances.list_instances(cloud)
    assert listed["socks5_status"] == "not created"
    assert listed["security_groups"][0]["group_name"] == "ads-sg-eu-central-1"

    inventory = MockAgentInventory([set(), {instance_id}])
    agent.activate_proxy(instance_id, cloud, inventory, interval=0)
    assert instances.list_instances(cloud)[0]["socks5_status"] == "created"

    first_ip = addresses.reassign_address(instance_id, cloud)
    second_ip = addresses.reassign_address(instance_id, cloud)
    assert first_ip != second_ip
    assert instances.list_instances(cloud)[0]["public_ip"] == second_ip
    assert len(cloud.associated_allocations(instance_id)) == 1
    assert len(cloud.addresses) == 1

    remaining = instances.terminate(instance_id, cloud)
    assert remaining == []
    assert cloud.instances[instance_id]["State"]["Name"] == "terminated"

    # A second launch in the same region reuses the key pair and security group.
    cloud.calls.clear()
    provisioner.create_instance("eu-central-1", cloud, key_store, "ads-global-key")
    assert "create_key_pair" not in cloud.call_names()
    assert "create_security_group" not in cloud.call_names()
