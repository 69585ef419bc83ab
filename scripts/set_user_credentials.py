#!/usr/bin/env python3
"""Store a user's AWS credentials directly in the configured credentials table."""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from pathlib import Path

# Ensure repository root is importable when running from a checkout.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def _env_name_for_option(option: str) -> str:
    return option.lstrip("-").replace("-", "_").upper()


def _resolve_opt(action: argparse.Action, cli_value: str | None, required: bool = True) -> str | None:
    if cli_value:
        return cli_value
    long_opts = [opt for opt in action.option_strings if opt.startswith("--")]
    canonical_opt = long_opts[0] if long_opts else action.option_strings[0]
    env_name = _env_name_for_option(canonical_opt)
    env_value = os.environ.get(env_name)
    if env_value:
        return env_value
    if required:
        raise RuntimeError(f"Missing {canonical_opt}. Provide {canonical_opt} or set {env_name}.")
    return None


def main() -> None:
    parser = argparse.ArgumentParser(description="Store AWS credentials for a user")
    parser.add_argument("--email", required=True, help="User email")
    parser.add_argument("--access-key-id", required=True, help="User's AWS access key ID")
    table_action = parser.add_argument(
        "--credentials-table", help="Credentials table name (or use CREDENTIALS_TABLE)"
    )
    region_action = parser.add_argument(
        "--aws-region",
        "--region",
        dest="aws_region",
        help="AWS region (or use AWS_REGION)",
    )
    parser.add_argument(
        "--create-user",
        action="store_true",
        help="Create the user record if it does not exist",
    )
    args = parser.parse_args()

    table_name = _resolve_opt(table_action, args.credentials_table)
    region = _resolve_opt(region_action, args.aws_region, required=False)
    secret = os.environ.get("SECRET_ACCESS_KEY") or getpass.getpass("Secret access key: ")

    from proxy_control.backends.aws.credentials import DynamoDBCredentialStore
    from proxy_control.core.interfaces import Credentials

    store = DynamoDBCredentialStore(table_name=table_name, region_name=region)
    if args.create_user and store.get_user(args.email) is None:
        store.put_user({"email": args.email})

    try:
        store.put_credentials(args.email, Credentials(args.access_key_id, secret))
    except KeyError:
        sys.exit(f"User {args.email} not found (use --create-user to create it)")
    print(f"Stored credentials for {args.email}")


if __name__ == "__main__":
    main()
