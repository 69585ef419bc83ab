"""Smoke tests for mock backends."""

import pytest

from proxy_control.backends.mock.agent import MockAgentInventory
from proxy_control.core.errors import DuplicateResource, RemoteFailure, ResourceNotFound
from proxy_control.core.interfaces import Credentials


def test_credential_store_round_trip(credential_store):
    creds = credential_store.get_credentials("user@example.com")
    assert creds == Credentials("AKIAEXAMPLE", "secret-example")

    credential_store.put_credentials("user@example.com", Credentials("AKIA2", "s2"))
    assert credential_store.get_credentials("user@example.com").access_key_id == "AKIA2"

    assert credential_store.get_credentials("missing@example.com") is None
    with pytest.raises(KeyError):
        credential_store.put_credentials("missing@example.com", creds)


def test_credential_store_user_without_keys(credential_store):
    credential_store.put_user({"email": "new@example.com", "username": "new"})

    assert credential_store.get_user("new@example.com") is not None
    assert credential_store.get_credentials("new@example.com") is None


def test_credentials_repr_hides_secret():
    assert "topsecret" not in repr(Credentials("AKIA", "topsecret"))


def test_agent_inventory_repeats_last_poll():
    inventory = MockAgentInventory([set(), {"i-1"}])

    assert inventory.registered_instance_ids() == set()
    assert inventory.registered_instance_ids() == {"i-1"}
    assert inventory.registered_instance_ids() == {"i-1"}
    assert inventory.poll_count == 3


def test_cloud_key_pair_and_rule_semantics(cloud):
    cloud.create_key_pair("k")
    with pytest.raises(DuplicateResource):
        cloud.create_key_pair("k")

    group_id = cloud.create_security_group("g", "desc", "vpc-default")
    rule = [{"IpProtocol": "-1"}]
    cloud.authorize_ingress(group_id, rule)
    with pytest.raises(DuplicateResource):
        cloud.authorize_ingress(group_id, rule)

    with pytest.raises(ResourceNotFound):
        cloud.find_security_group("g", "vpc-other")


def test_cloud_refuses_to_release_associated_address(cloud):
    cloud.add_instance("i-1")
    allocation = cloud.allocate_address()
    cloud.associate_address(allocation["allocation_id"], "i-1")

    with pytest.raises(RemoteFailure):
        cloud.release_address(allocation["allocation_id"])
