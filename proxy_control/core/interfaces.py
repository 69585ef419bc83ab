"""Abstract interfaces for proxy-control backends.

Core business logic depends only on these protocols, never on cloud-specific
SDKs like boto3. Every CloudProvider is already scoped to one region and one
set of credentials; building it is the backend's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Credentials:
    """An access-key / secret-key pair supplied by the caller."""

    access_key_id: str
    secret_access_key: str

    def __repr__(self) -> str:
        return f"Credentials(access_key_id={self.access_key_id!r}, secret_access_key='***')"


class CloudProvider(Protocol):
    """Region-scoped compute operations.

    Absence is reported with ResourceNotFound and duplicates with
    DuplicateResource; everything else is RemoteFailure.
    """

    region: str

    # --- Network ---

    def default_vpc_id(self) -> str | None:
        """Return the first VPC flagged as default, or None."""
        ...

    # --- Key pairs ---

    def describe_key_pair(self, key_name: str) -> dict:
        """Return the remote key pair record. Raises ResourceNotFound."""
        ...

    def create_key_pair(self, key_name: str) -> str:
        """Create a key pair and return its private key material."""
        ...

    def delete_key_pair(self, key_name: str) -> None:
        ...

    # --- Security groups ---

    def find_security_group(self, group_name: str, vpc_id: str | None) -> str:
        """Return the id of a group by name within a VPC. Raises ResourceNotFound."""
        ...

    def create_security_group(self, group_name: str, description: str, vpc_id: str | None) -> str:
        ...

    def authorize_ingress(self, group_id: str, permissions: list[dict]) -> None:
        """Add ingress rules. Raises DuplicateResource if already present."""
        ...

    def authorize_egress(self, group_id: str, permissions: list[dict]) -> None:
        """Add egress rules. Raises DuplicateResource if already present."""
        ...

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
        """Launch exactly one instance and return its descriptor.

        ``user_data`` is the plain script; backends apply the wire encoding.
        """
        ...

    def describe_instances(self) -> list[dict]:
        """Return every instance in the region as provider descriptors."""
        ...

    def create_tags(self, resource_id: str, tags: dict[str, str]) -> None:
        ...

    def delete_tags(self, resource_id: str, keys: list[str]) -> None:
        ...

    def terminate_instance(self, instance_id: str) -> None:
        ...

    def wait_until_terminated(self, instance_id: str) -> None:
        """Block until the instance is terminated. Raises OperationTimeout."""
        ...

    # --- Elastic IPs ---

    def allocate_address(self) -> dict:
        """Allocate a VPC address. Returns {"allocation_id", "public_ip"}."""
        ...

    def find_instance_address(self, instance_id: str) -> str | None:
        """Return the allocation id associated with an instance, if any."""
        ...

    def associate_address(self, allocation_id: str, instance_id: str) -> None:
        ...

    def release_address(self, allocation_id: str) -> None:
        ...

    # --- Images ---

    def add_launch_permission(self, image_id: str, account_id: str) -> None:
        ...


class AgentInventory(Protocol):
    """Management-agent (SSM) inventory for one region."""

    def registered_instance_ids(self) -> set[str]:
        """Return ids of every instance currently registered with the agent service."""
        ...


class CredentialStore(Protocol):
    """Per-user credential records, keyed by email."""

    def get_user(self, email: str) -> dict | None:
        ...

    def get_credentials(self, email: str) -> Credentials | None:
        """Return the user's credentials, or None if the user or either key is missing."""
        ...

    def put_credentials(self, email: str, credentials: Credentials) -> None:
        """Store credentials on an existing user record. Raises KeyError if absent."""
        ...
