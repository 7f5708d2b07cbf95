"""Exception types for the sensor node agent."""

from typing import Iterable


class NodeError(Exception):
    """Base class for sensor node errors."""


class ConfigMissingError(NodeError):
    """Stored credentials are absent or partial."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing stored credential keys: {', '.join(self.missing)}")


class RadioError(NodeError):
    """A radio driver command failed."""
