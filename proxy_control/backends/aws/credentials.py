"""DynamoDB-backed user credential store."""

from __future__ import annotations

import boto3

from proxy_control.backends.aws.cloud import translate_errors
from proxy_control.core.interfaces import Credentials


class DynamoDBCredentialStore:
    def __init__(
        self,
        table_name: str,
        endpoint_url: str | None = None,
        region_name: str | None = None,
    ):
        kwargs = {}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if region_name:
            kwargs["region_name"] = region_name
        dynamodb = boto3.resource("dynamodb", **kwargs)
        self._users = dynamodb.Table(table_name)

    def get_user(self, email: str) -> dict | None:
        with translate_errors():
            resp = self._users.get_item(Key={"email": email})
        return resp.get("Item")

    def get_credentials(self, email: str) -> Credentials | None:
        if not email:
            return None
        user = self.get_user(email)
        if not user or not user.get("access_key_id") or not user.get("secret_access_key"):
            return None
        return Credentials(user["access_key_id"], user["secret_access_key"])

    def put_credentials(self, email: str, credentials: Credentials) -> None:
        with translate_errors():
            try:
                self._users.update_item(
                    Key={"email": email},
                    UpdateExpression="SET access_key_id = :a, secret_access_key = :s",
                    ConditionExpression="attribute_exists(email)",
                    ExpressionAttributeValues={
                        ":a": credentials.access_key_id,
                        ":s": credentials.secret_access_key,
                    },
                )
            except self._users.meta.client.exceptions.ConditionalCheckFailedException:
                raise KeyError(f"User {email} not found") from None

    def put_user(self, user: dict) -> None:
        with translate_errors():
            self._users.put_item(Item=user)
