"""Unit tests for the AMI launch-permission fan-out."""

from __future__ import annotations

from proxy_control.backends.mock.cloud import InMemoryCloud
from proxy_control.core import ami
from proxy_control.core.errors import RemoteFailure
from proxy_control.core.regions import AMI_MAP


def _factory(clouds: dict, failing: set[str] = frozenset()):
    def build(region: str) -> InMemoryCloud:
        cloud = InMemoryCloud(region=region)
        if region in failing:
            cloud.failures["add_launch_permission"] = RemoteFailure(f"not authorized in {region}")
        clouds[region] = cloud
        return cloud

    return build


def test_grant_to_account_succeeds_in_every_region():
    clouds = {}

    results = ami.grant_to_account("123456789012", _factory(clouds))

    assert [r["region"] for r in results] == list(AMI_MAP)
    assert all(r["status"] == "success" for r in results)
    for region, ami_id in AMI_MAP.items():
        assert clouds[region].launch_permissions == {ami_id: ["123456789012"]}


def test_grant_to_account_records_partial_failure():
    clouds = {}

    results = ami.grant_to_account("123456789012", _factory(clouds, failing={"eu-south-2"}))

    assert len(results) == 16
    failed = [r for r in results if r["status"] == "failed"]
    assert failed == [
        {
            "region": "eu-south-2",
            "ami_id": AMI_MAP["eu-south-2"],
            "status": "failed",
            "error": "not authorized in eu-south-2",
        }
    ]
    assert sum(1 for r in results if r["status"] == "success") == 15


def test_grant_to_account_contains_factory_errors():
    def build(region):
        if region == "us-west-1":
            raise RuntimeError("no credentials")
        return InMemoryCloud(region=region)

    results = ami.grant_to_account("123456789012", build, max_workers=1)

    assert len(results) == len(AMI_MAP)
    by_region = {r["region"]: r for r in results}
    assert by_region["us-west-1"]["error"] == "no credentials"
    assert by_region["us-east-1"]["status"] == "success"


def test_grant_to_account_uses_custom_catalog():
    results = ami.grant_to_account("1", _factory({}), catalog={"b": "ami-b", "a": "ami-a"})

    assert [(r["region"], r["ami_id"]) for r in results] == [("b", "ami-b"), ("a", "ami-a")]
