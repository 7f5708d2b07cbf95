"""Credential store over a flash-style key-value namespace."""

import json
import logging
from pathlib import Path
from typing import Iterable

from sensornode.errors import ConfigMissingError
from sensornode.models.credentials import (
    CREDENTIAL_KEYS,
    KEY_API,
    KEY_PASS,
    KEY_SSID,
    Credentials,
)


class CredentialStore:
    """Persisted string key-value pairs in a named namespace.

    The namespace lives at <storage_dir>/<namespace>.json. Every put rewrites
    the file, so the three credential keys are written as independent
    operations. A crash between two puts leaves a partial triple, which then
    fails has_all() and sends the operator to New-Setup.
    """

    def __init__(self, storage_dir: str = "./data", namespace: str = "sensornode"):
        """Initialize credential store.

        Args:
            storage_dir: Directory holding namespace files
            namespace: Namespace name (file stem)
        """
        self.logger = logging.getLogger("sensornode.credentials")
        self.namespace = namespace
        self.path = Path(storage_dir) / f"{namespace}.json"

    def _read(self) -> dict[str, str]:
        """Read the namespace file.

        Returns:
            Stored pairs; empty if the file is missing or unreadable
        """
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to read namespace '{self.namespace}': {e}", exc_info=True)
            return {}

        if not isinstance(data, dict):
            self.logger.error(f"Namespace '{self.namespace}' is not a key-value mapping, ignoring")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def has_all(self, keys: Iterable[str] = CREDENTIAL_KEYS) -> bool:
        """Check that every key is present (an empty value still counts)."""
        data = self._read()
        return all(key in data for key in keys)

    def missing(self, keys: Iterable[str] = CREDENTIAL_KEYS) -> list[str]:
        """Return the keys absent from the namespace."""
        data = self._read()
        return [key for key in keys if key not in data]

    def get(self, key: str, default: str = "") -> str:
        """Read one value; default when the key is absent."""
        return self._read().get(key, default)

    def put(self, key: str, value: str) -> None:
        """Write one value.

        Raises:
            OSError: If the namespace file cannot be written
        """
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        self.logger.debug(f"Stored key '{key}' in namespace '{self.namespace}'")

    def load(self) -> Credentials:
        """Load the stored triple.

        Raises:
            ConfigMissingError: If any of ssid/pass/api is absent
        """
        missing = self.missing()
        if missing:
            raise ConfigMissingError(missing)

        return Credentials(
            network_name=self.get(KEY_SSID),
            network_secret=self.get(KEY_PASS),
            upload_key=self.get(KEY_API),
        )

    def save(self, credentials: Credentials) -> None:
        """Persist the triple as three independent puts (ssid, pass, api)."""
        for key, value in credentials.as_store_items():
            self.put(key, value)
        self.logger.info(f"Saved credentials for network '{credentials.network_name}'")

