"""Local private-key material for the shared key pair."""

from __future__ import annotations

import os
from pathlib import Path


KEY_SUFFIX = ".pem"
KEY_FILE_MODE = 0o600


class KeyMaterialStore:
    """Stores one private key file per key pair name under a keys directory."""

    def __init__(self, keys_dir: str | os.PathLike):
        self._keys_dir = Path(keys_dir)

    def path_for(self, key_name: str) -> Path:
        return self._keys_dir / f"{key_name}{KEY_SUFFIX}"

    def exists(self, key_name: str) -> bool:
        return self.path_for(key_name).is_file()

    def write(self, key_name: str, material: str) -> Path:
        """Write key material with owner-only permissions, replacing any old file."""
        path = self.path_for(key_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, KEY_FILE_MODE)
        with os.fdopen(fd, "w") as fh:
            fh.write(material)
        # O_CREAT's mode is ignored for files that already exist.
        os.chmod(path, KEY_FILE_MODE)
        return path
