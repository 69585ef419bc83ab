"""SSM agent inventory backend."""

from __future__ import annotations

import boto3

from proxy_control.backends.aws.cloud import client_kwargs, translate_errors
from proxy_control.core.interfaces import Credentials


class SSMAgentInventory:
    def __init__(
        self,
        region: str,
        credentials: Credentials | None = None,
        endpoint_url: str | None = None,
    ):
        self.region = region
        self._ssm = boto3.client("ssm", **client_kwargs(region, credentials, endpoint_url))

    def registered_instance_ids(self) -> set[str]:
        ids = set()
        with translate_errors():
            paginator = self._ssm.get_paginator("describe_instance_information")
            for page in paginator.paginate():
                ids.update(info["InstanceId"] for info in page.get("InstanceInformationList", []))
        return ids
