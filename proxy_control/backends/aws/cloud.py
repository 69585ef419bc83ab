"""EC2 cloud backend — region-scoped boto3 client with error translation."""

from __future__ import annotations

import contextlib

import boto3
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from proxy_control.core.errors import (
    DuplicateResource,
    OperationTimeout,
    RemoteFailure,
    ResourceNotFound,
)
from proxy_control.core.interfaces import Credentials

NOT_FOUND_CODES = frozenset(
    {
        "InvalidKeyPair.NotFound",
        "InvalidGroup.NotFound",
        "InvalidAllocationID.NotFound",
        "InvalidAddress.NotFound",
        "InvalidInstanceID.NotFound",
        "InvalidAMIID.NotFound",
    }
)
DUPLICATE_CODES = frozenset(
    {
        "InvalidPermission.Duplicate",
        "InvalidKeyPair.Duplicate",
        "InvalidGroup.Duplicate",
    }
)


def client_kwargs(
    region: str,
    credentials: Credentials | None = None,
    endpoint_url: str | None = None,
) -> dict:
    """Build boto3 client kwargs. Without credentials boto3 uses its default chain."""
    kwargs = {"region_name": region}
    if credentials is not None:
        kwargs["aws_access_key_id"] = credentials.access_key_id
        kwargs["aws_secret_access_key"] = credentials.secret_access_key
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return kwargs


@contextlib.contextmanager
def translate_errors():
    """Re-raise botocore failures as core error kinds."""
    try:
        yield
    except ClientError as exc:
        error = exc.response.get("Error", {})
        code = error.get("Code", "")
        message = error.get("Message") or str(exc)
        if code in NOT_FOUND_CODES:
            raise ResourceNotFound(message) from exc
        if code in DUPLICATE_CODES:
            raise DuplicateResource(message) from exc
        raise RemoteFailure(message, code=code) from exc
    except BotoCoreError as exc:
        raise RemoteFailure(str(exc)) from exc


class EC2CloudProvider:
    def __init__(
        self,
        region: str,
        credentials: Credentials | None = None,
        endpoint_url: str | None = None,
    ):
        self.region = region
        self._ec2 = boto3.client("ec2", **client_kwargs(region, credentials, endpoint_url))

    # --- Network ---

    def default_vpc_id(self) -> str | None:
        with translate_errors():
            resp = self._ec2.describe_vpcs(Filters=[{"Name": "is-default", "Values": ["true"]}])
        vpcs = resp.get("Vpcs", [])
        return vpcs[0]["VpcId"] if vpcs else None

    # --- Key pairs ---

    def describe_key_pair(self, key_name: str) -> dict:
        with translate_errors():
            resp = self._ec2.describe_key_pairs(KeyNames=[key_name])
        pairs = resp.get("KeyPairs", [])
        if not pairs:
            raise ResourceNotFound(f"Key pair {key_name} not found")
        return pairs[0]

    def create_key_pair(self, key_name: str) -> str:
        with translate_errors():
            resp = self._ec2.create_key_pair(KeyName=key_name)
        return resp["KeyMaterial"]

    def delete_key_pair(self, key_name: str) -> None:
        with translate_errors():
            self._ec2.delete_key_pair(KeyName=key_name)

    # --- Security groups ---

    def find_security_group(self, group_name: str, vpc_id: str | None) -> str:
        filters = [{"Name": "group-name", "Values": [group_name]}]
        if vpc_id:
            filters.append({"Name": "vpc-id", "Values": [vpc_id]})
        with translate_errors():
            resp = self._ec2.describe_security_groups(Filters=filters)
        groups = resp.get("SecurityGroups", [])
        if not groups:
            raise ResourceNotFound(f"Security group {group_name} not found")
        return groups[0]["GroupId"]

    def create_security_group(self, group_name: str, description: str, vpc_id: str | None) -> str:
        kwargs = {"GroupName": group_name, "Description": description}
        if vpc_id:
            kwargs["VpcId"] = vpc_id
        with translate_errors():
            resp = self._ec2.create_security_group(**kwargs)
        return resp["GroupId"]

    def authorize_ingress(self, group_id: str, permissions: list[dict]) -> None:
        with translate_errors():
            self._ec2.authorize_security_group_ingress(GroupId=group_id, IpPermissions=permissions)

    def authorize_egress(self, group_id: str, permissions: list[dict]) -> None:
        with translate_errors():
            self._ec2.authorize_security_group_egress(GroupId=group_id, IpPermissions=permissions)

    # --- Instances ---

    def run_instance(
        self,
        *,
        image_id: str,
        instance_type: str,
        key_name: str,
        security_group_ids: list[str],
        user_data: str,
        instance_profile_name: str,
    ) -> dict:
        # botocore base64-encodes UserData for RunInstances.
        with translate_errors():
            resp = self._ec2.run_instances(
                ImageId=image_id,
                InstanceType=instance_type,
                MinCount=1,
                MaxCount=1,
                KeyName=key_name,
                SecurityGroupIds=security_group_ids,
                IamInstanceProfile={"Name": instance_profile_name},
                UserData=user_data,
            )
        return resp["Instances"][0]

    def describe_instances(self) -> list[dict]:
        instances = []
        with translate_errors():
            paginator = self._ec2.get_paginator("describe_instances")
            for page in paginator.paginate():
                for reservation in page.get("Reservations", []):
                    instances.extend(reservation.get("Instances", []))
        return instances

    def create_tags(self, resource_id: str, tags: dict[str, str]) -> None:
        with translate_errors():
            self._ec2.create_tags(
                Resources=[resource_id],
                Tags=[{"Key": k, "Value": v} for k, v in tags.items()],
            )

    def delete_tags(self, resource_id: str, keys: list[str]) -> None:
        with translate_errors():
            self._ec2.delete_tags(Resources=[resource_id], Tags=[{"Key": k} for k in keys])

    def terminate_instance(self, instance_id: str) -> None:
        with translate_errors():
            self._ec2.terminate_instances(InstanceIds=[instance_id])

    def wait_until_terminated(self, instance_id: str) -> None:
        waiter = self._ec2.get_waiter("instance_terminated")
        try:
            waiter.wait(InstanceIds=[instance_id])
        except WaiterError as exc:
            raise OperationTimeout(
                f"Instance {instance_id} did not reach terminated state: {exc}", instance_id
            ) from exc

    # --- Elastic IPs ---

    def allocate_address(self) -> dict:
        with translate_errors():
            resp = self._ec2.allocate_address(Domain="vpc")
        return {"allocation_id": resp["AllocationId"], "public_ip": resp["PublicIp"]}

    def find_instance_address(self, instance_id: str) -> str | None:
        with translate_errors():
            resp = self._ec2.describe_addresses(
                Filters=[{"Name": "instance-id", "Values": [instance_id]}]
            )
        addresses = resp.get("Addresses", [])
        return addresses[0].get("AllocationId") if addresses else None

    def associate_address(self, allocation_id: str, instance_id: str) -> None:
        with translate_errors():
            self._ec2.associate_address(AllocationId=allocation_id, InstanceId=instance_id)

    def release_address(self, allocation_id: str) -> None:
        with translate_errors():
            self._ec2.release_address(AllocationId=allocation_id)

    # --- Images ---

    def add_launch_permission(self, image_id: str, account_id: str) -> None:
        with translate_errors():
            self._ec2.modify_image_attribute(
                ImageId=image_id,
                LaunchPermission={"Add": [{"UserId": account_id}]},
            )
