"""Unit tests for instance listing and termination."""

from __future__ import annotations

import pytest

from proxy_control.core import instances
from proxy_control.core.errors import OperationTimeout


def test_list_instances_derives_socks5_status(cloud):
    cloud.add_instance("i-new", public_ip="198.51.100.1")
    cloud.add_instance("i-active", tags={"Socks5": "created"})

    result = {inst["instance_id"]: inst for inst in instances.list_instances(cloud)}

    assert result["i-new"] == {
        "instance_id": "i-new",
        "state": "running",
        "public_ip": "198.51.100.1",
        "security_groups": [],
        "socks5_status": "not created",
    }
    assert result["i-active"]["socks5_status"] == "created"
    assert result["i-active"]["public_ip"] == ""


def test_terminate_removes_tag_and_excludes_instance(cloud):
    cloud.add_instance("i-gone", tags={"Socks5": "created"})
    cloud.add_instance("i-stays")

    result = instances.terminate("i-gone", cloud)

    assert [inst["instance_id"] for inst in result] == ["i-stays"]
    assert cloud.instances["i-gone"]["State"]["Name"] == "terminated"
    assert cloud.instances["i-gone"]["Tags"] == []
    names = cloud.call_names()
    assert names.index("delete_tags") < names.index("terminate_instance") < names.index("wait_until_terminated")


def test_terminate_raises_timeout_when_never_terminated(cloud):
    cloud.add_instance("i-stuck")
    cloud.failures["wait_until_terminated"] = OperationTimeout("still shutting down", "i-stuck")

    with pytest.raises(OperationTimeout) as excinfo:
        instances.terminate("i-stuck", cloud)

    assert excinfo.value.resource_id == "i-stuck"
    assert "describe_instances" not in cloud.call_names()
