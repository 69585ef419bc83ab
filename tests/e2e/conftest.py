"""E2E test fixtures — optional LocalStack-backed EC2, SSM and DynamoDB."""

from __future__ import annotations

import os
import sys
import uuid

import boto3
import pytest
from botocore.exceptions import BotoCoreError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))


@pytest.fixture(scope="session")
def localstack_env():
    """Start LocalStack and provision the credentials table used by handlers."""
    try:
        from testcontainers.core.exceptions import ContainerStartException
        from testcontainers.localstack import LocalStackContainer
    except ModuleNotFoundError as exc:
        pytest.skip(f"LocalStack tests require testcontainers dependency: {exc}")

    container = LocalStackContainer(image="localstack/localstack:3.0").with_services("ec2", "ssm", "dynamodb")

    try:
        container.start()
    except (ContainerStartException, BotoCoreError, OSError) as exc:
        pytest.skip(f"LocalStack unavailable in this environment: {exc}")

    endpoint_url = container.get_url()
    region = "us-east-1"
    access_key = "test"
    secret_key = "test"

    os.environ.setdefault("AWS_ACCESS_KEY_ID", access_key)
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", secret_key)
    os.environ.setdefault("AWS_DEFAULT_REGION", region)

    credentials_table = f"proxy-control-credentials-e2e-{uuid.uuid4().hex[:8]}"

    dynamodb = boto3.client(
        "dynamodb",
        endpoint_url=endpoint_url,
        region_name=region,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
    )
    dynamodb.create_table(
        TableName=credentials_table,
        AttributeDefinitions=[{"AttributeName": "email", "AttributeType": "S"}],
        KeySchema=[{"AttributeName": "email", "KeyType": "HASH"}],
        BillingMode="PAY_PER_REQUEST",
    )
    dynamodb.get_waiter("table_exists").wait(TableName=credentials_table)

    yield {
        "endpoint_url": endpoint_url,
        "region": region,
        "aws_access_key_id": access_key,
        "aws_secret_access_key": secret_key,
        "credentials_table": credentials_table,
    }

    container.stop()
