"""Wireless radio drivers.

NetworkConnector only needs four primitives from the radio stack: start an
association, read the association state, disconnect, and reconnect. The host
driver below implements them with the NetworkManager CLI.
"""

import asyncio
import logging
from typing import Protocol

from sensornode.errors import RadioError
from sensornode.models.status import ConnectionState


class RadioDriver(Protocol):
    """Radio capability consumed by NetworkConnector."""

    async def begin(self, network_name: str, network_secret: str) -> None:
        """Start associating with a network; must not wait for the result."""
        ...

    async def status(self) -> ConnectionState:
        """Report the current association state."""
        ...

    async def disconnect(self) -> None:
        """Drop the current association."""
        ...

    async def reconnect(self) -> None:
        """Re-associate with the last network, best-effort."""
        ...


class NmcliRadio:
    """RadioDriver backed by `nmcli` on a Linux host."""

    def __init__(self, interface: str = "wlan0"):
        """Initialize nmcli driver.

        Args:
            interface: Wireless device name (e.g., "wlan0")
        """
        self.logger = logging.getLogger("sensornode.radio")
        self.interface = interface

    async def _run(self, *args: str) -> str:
        """Run one nmcli command.

        Returns:
            Decoded stdout

        Raises:
            RadioError: If nmcli cannot be started or exits non-zero
        """
        try:
            process = await asyncio.create_subprocess_exec(
                "nmcli",
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RadioError(f"Failed to start nmcli: {e}") from e

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise RadioError(
                f"nmcli {args[0]} failed: exit code {process.returncode}, "
                f"stderr: {stderr.decode().strip()}"
            )
        return stdout.decode()

    async def begin(self, network_name: str, network_secret: str) -> None:
        args = ["--wait", "0", "device", "wifi", "connect", network_name]
        # Blank secret means an open network
        if network_secret.strip():
            args += ["password", network_secret]
        args += ["ifname", self.interface]

        self.logger.debug(f"Associating {self.interface} with '{network_name}'")
        await self._run(*args)

    async def status(self) -> ConnectionState:
        output = await self._run("-t", "-f", "DEVICE,STATE", "device", "status")
        for line in output.splitlines():
            device, _, state = line.partition(":")
            if device != self.interface:
                continue
            if state == "connected":
                return ConnectionState.CONNECTED
            if state.startswith("connecting"):
                return ConnectionState.CONNECTING
            return ConnectionState.DISCONNECTED

        self.logger.warning(f"Interface {self.interface} not listed by nmcli")
        return ConnectionState.DISCONNECTED

    async def disconnect(self) -> None:
        await self._run("device", "disconnect", self.interface)

    async def reconnect(self) -> None:
        await self._run("--wait", "0", "device", "connect", self.interface)
