"""Shared fixtures for unit tests — uses mock backends, no AWS needed."""

import pytest
import sys
import os

# Add project root to path so proxy_control is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from proxy_control.backends.mock.cloud import InMemoryCloud
from proxy_control.backends.mock.credentials import InMemoryCredentialStore
from proxy_control.core.keys import KeyMaterialStore


SAMPLE_USER = {
    "email": "user@example.com",
    "username": "user",
    "access_key_id": "AKIAEXAMPLE",
    "secret_access_key": "secret-example",
}


@pytest.fixture
def cloud():
    return InMemoryCloud(region="us-east-1")


@pytest.fixture
def key_store(tmp_path):
    return KeyMaterialStore(tmp_path / "keys")


@pytest.fixture
def credential_store():
    store = InMemoryCredentialStore()
    store.put_user(dict(SAMPLE_USER))
    return store
