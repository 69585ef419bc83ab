"""In-memory credential store for testing."""

from __future__ import annotations

from proxy_control.core.interfaces import Credentials


class InMemoryCredentialStore:
    def __init__(self):
        self._users: dict[str, dict] = {}

    def put_user(self, user: dict) -> None:
        self._users[user["email"]] = user

    def get_user(self, email: str) -> dict | None:
        return self._users.get(email)

    def get_credentials(self, email: str) -> Credentials | None:
        user = self._users.get(email)
        if not user or not user.get("access_key_id") or not user.get("secret_access_key"):
            return None
        return Credentials(user["access_key_id"], user["secret_access_key"])

    def put_credentials(self, email: str, credentials: Credentials) -> None:
        user = self._users.get(email)
        if user is None:
            raise KeyError(f"User {email} not found")
        user["access_key_id"] = credentials.access_key_id
        user["secret_access_key"] = credentials.secret_access_key
