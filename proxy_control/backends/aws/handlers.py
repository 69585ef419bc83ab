"""AWS Lambda handler entry points.

These are thin wrappers that parse Lambda events, build backend dependencies,
call cloud-agnostic core logic, and format responses. All business logic
lives in proxy_control/core/.
"""

from __future__ import annotations

import json
import logging
import threading
from decimal import Decimal

from proxy_control.core.errors import ProviderError

logger = logging.getLogger(__name__)

# Stop polling this long before the Lambda deadline.
ACTIVATION_DEADLINE_MARGIN_MS = 10_000


# ---- Shared helpers ----


def _get_credential_store():
    """Build a DynamoDBCredentialStore from environment variables."""
    from proxy_control.shared.config import CREDENTIALS_TABLE
    from proxy_control.backends.aws.credentials import DynamoDBCredentialStore

    return DynamoDBCredentialStore(table_name=CREDENTIALS_TABLE())


def _get_key_store():
    from proxy_control.shared.config import KEYS_DIR
    from proxy_control.core.keys import KeyMaterialStore

    return KeyMaterialStore(KEYS_DIR())


def _get_cloud(region: str, credentials=None):
    """Build a region-scoped EC2CloudProvider. No credentials means the default chain."""
    from proxy_control.backends.aws.cloud import EC2CloudProvider

    return EC2CloudProvider(region, credentials)


def _get_agent_inventory(region: str, credentials):
    from proxy_control.backends.aws.agent import SSMAgentInventory

    return SSMAgentInventory(region, credentials)


def _api_response(status_code: int, body: dict, headers: dict | None = None) -> dict:
    """Format an API Gateway v2 response."""
    resp = {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, default=_json_default),
    }
    if headers:
        resp["headers"].update(headers)
    return resp


def _json_default(value):
    """Serialize types that Python's JSON encoder does not handle."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    raise TypeError(f"Object of type {value.__class__.__name__} is not JSON serializable")


def _failure(status_code: int, message: str, exc: Exception | None = None) -> dict:
    body = {"success": False, "message": message}
    if exc is not None:
        body["error"] = str(exc)
    return _api_response(status_code, body)


def _make_trigger_activation():
    """Return a callable that async-invokes the activation worker Lambda."""
    import boto3
    from proxy_control.backends.aws.cloud import translate_errors
    from proxy_control.shared.config import ACTIVATION_FUNCTION_NAME

    client = boto3.client("lambda")
    function_name = ACTIVATION_FUNCTION_NAME()

    def trigger(instance_id: str, region: str, email: str):
        with translate_errors():
            client.invoke(
                FunctionName=function_name,
                InvocationType="Event",  # async
                Payload=json.dumps({"instance_id": instance_id, "region": region, "email": email}),
            )

    return trigger


# ---- Routes ----


def _create_instance(body, credentials):
    from proxy_control.shared.config import KEY_PAIR_NAME
    from proxy_control.core.provisioner import create_instance

    region = body.get("region", "")
    instance = create_instance(region, _get_cloud(region, credentials), _get_key_store(), KEY_PAIR_NAME())
    return _api_response(200, {"success": True, "data": instance})


def _describe_instances(body, credentials):
    from proxy_control.core.instances import list_instances

    result = list_instances(_get_cloud(body.get("region", ""), credentials))
    return _api_response(200, {"success": True, "data": result})


def _create_socks5(body, credentials):
    from proxy_control.core.regions import ami_for_region

    instance_id = body.get("instanceId", "")
    if not instance_id:
        raise ValueError("instanceId is required")
    region = body.get("region", "")
    # Reject unmapped regions before the worker is queued.
    ami_for_region(region)
    trigger = _make_trigger_activation()
    trigger(instance_id, region, body.get("email", ""))
    return _api_response(202, {"success": True, "message": "socks5 activation started"})


def _terminate_instance(body, credentials):
    from proxy_control.core.instances import terminate

    result = terminate(body.get("instanceId", ""), _get_cloud(body.get("region", ""), credentials))
    return _api_response(200, {"success": True, "data": result})


def _change_ip(body, credentials):
    from proxy_control.core.addresses import reassign_address

    ip = reassign_address(body.get("instanceId", ""), _get_cloud(body.get("region", ""), credentials))
    return _api_response(200, {"success": True, "ip": ip})


def _release_ip(body, credentials):
    from proxy_control.core.addresses import release_address

    release_address(body.get("allocationId", ""), _get_cloud(body.get("region", ""), credentials))
    return _api_response(200, {"success": True})


CREDENTIALED_ROUTES = {
    "/api/create-instance": _create_instance,
    "/api/describe-instances": _describe_instances,
    "/api/create-socks5": _create_socks5,
    "/api/terminate-instance": _terminate_instance,
    "/api/change-ip": _change_ip,
    "/api/release-ip": _release_ip,
}


def _authorize_ami(body):
    from proxy_control.core.ami import grant_to_account

    account_id = body.get("accountId")
    if not account_id or not isinstance(account_id, str):
        return _failure(400, "accountId is required")

    # Runs under the deployment's own credentials, not a user's.
    result = grant_to_account(account_id, cloud_factory=_get_cloud)
    return _api_response(200, {"success": True, "result": result})


def _set_key(body):
    from proxy_control.core.interfaces import Credentials

    email = body.get("email")
    access_key_id = body.get("accessKeyId")
    secret_access_key = body.get("secretAccessKey")
    if not email or not access_key_id or not secret_access_key:
        return _failure(400, "email, accessKeyId and secretAccessKey are required")

    try:
        _get_credential_store().put_credentials(email, Credentials(access_key_id, secret_access_key))
    except KeyError:
        return _failure(404, "user not found")
    return _api_response(200, {"success": True, "message": "credentials saved"})


# ---- API ----


def api_handler(event, context):
    """API Lambda — instance, address and AMI operations."""
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("rawPath", "")

    if method != "POST":
        return _api_response(404, {"error": "not found"})

    try:
        body = json.loads(event.get("body") or "{}")

        if path == "/api/authorize-ami":
            return _authorize_ami(body)
        if path == "/api/set-key":
            return _set_key(body)

        route = CREDENTIALED_ROUTES.get(path)
        if route is None:
            return _api_response(404, {"error": "not found"})

        credentials = _get_credential_store().get_credentials(body.get("email", ""))
        if credentials is None:
            return _failure(403, "missing or invalid AWS credentials")

        return route(body, credentials)
    except ValueError as exc:
        return _failure(400, str(exc), exc)
    except ProviderError as exc:
        logger.exception("Request %s failed", path)
        return _failure(500, f"{path} failed", exc)


# ---- Activation worker ----


def activation_handler(event, context):
    """Activation worker Lambda — async-invoked by /api/create-socks5.

    Event: {"instance_id": "i-...", "region": "us-east-1", "email": "user@example.com"}
    """
    from proxy_control.core.agent import activate_proxy

    instance_id = event.get("instance_id", "")
    region = event.get("region", "")

    try:
        credentials = _get_credential_store().get_credentials(event.get("email", ""))
    except ProviderError as exc:
        logger.exception("Credential lookup for activation of %s failed", instance_id)
        return {"success": False, "instance_id": instance_id, "error": str(exc)}
    if credentials is None:
        logger.warning("No credentials for activation of %s in %s", instance_id, region)
        return {"success": False, "error": "missing credentials"}

    cancel = threading.Event()
    timer = None
    if context is not None and hasattr(context, "get_remaining_time_in_millis"):
        remaining_ms = context.get_remaining_time_in_millis() - ACTIVATION_DEADLINE_MARGIN_MS
        timer = threading.Timer(max(remaining_ms, 0) / 1000, cancel.set)
        timer.daemon = True
        timer.start()

    try:
        return activate_proxy(
            instance_id,
            _get_cloud(region, credentials),
            _get_agent_inventory(region, credentials),
            cancel=cancel,
        )
    except ProviderError as exc:
        logger.exception("Activation of %s in %s failed", instance_id, region)
        return {"success": False, "instance_id": instance_id, "error": str(exc)}
    finally:
        if timer is not None:
            timer.cancel()
