"""Configuration helpers — read from environment variables."""

from __future__ import annotations

import os


def get_env(name: str, default: str | None = None) -> str:
    """Get an environment variable, raising if missing and no default."""
    value = os.environ.get(name, default)
    if value is None:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


# Resource names (set by the deployment template)
CREDENTIALS_TABLE = lambda: get_env("CREDENTIALS_TABLE")
ACTIVATION_FUNCTION_NAME = lambda: get_env("ACTIVATION_FUNCTION_NAME")
KEYS_DIR = lambda: get_env("KEYS_DIR", "keys")
KEY_PAIR_NAME = lambda: get_env("KEY_PAIR_NAME", "ads-global-key")

INSTANCE_TYPE = "t2.micro"
INSTANCE_PROFILE_NAME = "SSMInstanceRole"
SECURITY_GROUP_PREFIX = "ads-sg-"
AGENT_POLL_INTERVAL = 5
AGENT_MAX_POLLS = 24
