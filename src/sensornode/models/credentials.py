"""Credentials model and persisted key layout."""

from pydantic import BaseModel, Field

# Persisted key names inside the storage namespace
KEY_SSID = "ssid"
KEY_PASS = "pass"
KEY_API = "api"
CREDENTIAL_KEYS = (KEY_SSID, KEY_PASS, KEY_API)


class Credentials(BaseModel):
    """Network name, network secret and upload key.

    Loaded from the credential store or entered during New-Setup; handed to
    ReportLoop by copy once boot reaches ready.
    """

    network_name: str = Field(..., description="Wi-Fi SSID")
    network_secret: str = Field(..., description="Wi-Fi passphrase")
    upload_key: str = Field(..., description="Write key for the uplink endpoint")

    def as_store_items(self) -> list[tuple[str, str]]:
        """Return (key, value) pairs in write order: ssid, pass, api."""
        return [
            (KEY_SSID, self.network_name),
            (KEY_PASS, self.network_secret),
            (KEY_API, self.upload_key),
        ]

    def __repr__(self) -> str:
        return f"Credentials(network_name={self.network_name!r}, network_secret='***', upload_key='***')"

    __str__ = __repr__
