"""Network connector with bounded connection polling."""

import asyncio
import logging

from sensornode.errors import RadioError
from sensornode.models.status import ConnectionState
from sensornode.services.radio import RadioDriver


class NetworkConnector:
    """Drives the radio to join a network and watches the connection.

    Every wait is bounded: `attempts` status polls spaced `interval` seconds
    apart (20 x 0.5 s by default). Radio command failures count as "not
    connected" for that attempt and never propagate.
    """

    def __init__(self, radio: RadioDriver, attempts: int = 20, interval: float = 0.5):
        """Initialize network connector.

        Args:
            radio: Radio capability
            attempts: Status polls per connect
            interval: Seconds between polls
        """
        self.logger = logging.getLogger("sensornode.network")
        self.radio = radio
        self.attempts = attempts
        self.interval = interval

    async def status(self) -> ConnectionState:
        """Current association state; DISCONNECTED if the radio errors."""
        try:
            return await self.radio.status()
        except RadioError as e:
            self.logger.warning(f"Radio status failed: {e}")
            return ConnectionState.DISCONNECTED

    async def is_connected(self) -> bool:
        return await self.status() == ConnectionState.CONNECTED

    async def wait_connected(self) -> bool:
        """Poll status until connected or the poll budget is spent.

        Returns:
            True iff connected within `attempts` polls
        """
        for attempt in range(1, self.attempts + 1):
            if await self.is_connected():
                self.logger.debug(f"Connected after {attempt} poll(s)")
                return True
            if attempt < self.attempts:
                await asyncio.sleep(self.interval)
        return False

    async def connect(self, network_name: str, network_secret: str) -> bool:
        """Join a network and wait for the association.

        Args:
            network_name: SSID to join
            network_secret: Passphrase (blank for open networks)

        Returns:
            True iff connected within the poll budget
        """
        self.logger.info(f"Connecting to '{network_name}'...")
        try:
            await self.radio.begin(network_name, network_secret)
        except RadioError as e:
            self.logger.warning(f"Failed to start association with '{network_name}': {e}")

        connected = await self.wait_connected()
        if connected:
            self.logger.info(f"Connected to '{network_name}'")
        else:
            self.logger.warning(
                f"Could not connect to '{network_name}' within "
                f"{self.attempts * self.interval:.1f}s"
            )
        return connected

    async def recover(self) -> bool:
        """Disconnect, reconnect and wait for the association.

        Returns:
            True iff connected within the poll budget
        """
        self.logger.info("Connection lost, reconnecting...")
        try:
            await self.radio.disconnect()
        except RadioError as e:
            self.logger.debug(f"Disconnect before reconnect failed: {e}")
        try:
            await self.radio.reconnect()
        except RadioError as e:
            self.logger.warning(f"Reconnect request failed: {e}")

        connected = await self.wait_connected()
        if connected:
            self.logger.info("Reconnected")
        return connected
