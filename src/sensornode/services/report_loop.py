"""Steady-state loop: connectivity watchdog and periodic uploads."""

import asyncio
import logging
import random
import time
from typing import Callable, Optional

from sensornode.models.credentials import Credentials
from sensornode.models.status import ErrorKind
from sensornode.models.upload import UploadResult
from sensornode.services.network import NetworkConnector
from sensornode.services.uplink import UplinkClient


class ReportLoop:
    """Runs once per scheduler tick after boot is ready.

    Each tick first repairs a lost connection (bounded, non-fatal), then
    uploads one measurement if the report interval has elapsed. The interval
    reference moves on every attempt, accepted or not.
    """

    def __init__(
        self,
        credentials: Credentials,
        network: NetworkConnector,
        uplink: UplinkClient,
        report_interval: float = 15.0,
        measurement_range: tuple[int, int] = (10, 60),
        clock: Callable[[], float] = time.monotonic,
        measure: Callable[[int, int], int] = random.randrange,
    ):
        """Initialize report loop.

        Args:
            credentials: Triple handed over by BootOrchestrator (read-only)
            network: Network connector used for recovery
            uplink: Uplink client used for reports
            report_interval: Seconds between report attempts
            measurement_range: Half-open [low, high) range of the placeholder reading
            clock: Monotonic clock in seconds
            measure: Measurement source, called as measure(low, high)
        """
        self.logger = logging.getLogger("sensornode.report")
        self.credentials = credentials
        self.network = network
        self.uplink = uplink
        self.report_interval = report_interval
        self.measurement_range = measurement_range
        self.clock = clock
        self.measure = measure

        self.last_report: float = clock()
        self.last_error: Optional[ErrorKind] = None

    def read_measurement(self) -> int:
        """Placeholder sensor read."""
        low, high = self.measurement_range
        return self.measure(low, high)

    async def check_connection(self) -> bool:
        """Watchdog: reconnect if the link is down.

        Returns:
            True if connected after the check
        """
        if await self.network.is_connected():
            return True

        if await self.network.recover():
            return True

        self.last_error = ErrorKind.CONNECT_FAILURE
        self.logger.warning("Reconnect failed, retrying next tick")
        return False

    def report_due(self, now: float) -> bool:
        return now - self.last_report >= self.report_interval

    async def tick(self, now: Optional[float] = None) -> Optional[UploadResult]:
        """Run one scheduler tick.

        Args:
            now: Clock reading to use (default: clock())

        Returns:
            UploadResult if an upload was attempted, None otherwise
        """
        if not await self.check_connection():
            return None

        now = self.clock() if now is None else now
        if not self.report_due(now):
            return None

        value = self.read_measurement()
        result = await self.uplink.report(self.credentials.upload_key, value)
        self.last_report = now

        if result.accepted:
            self.last_error = None
        else:
            self.last_error = ErrorKind.UPLOAD_REJECTED
        return result

    async def run_forever(self, tick_interval: float = 1.0) -> None:
        """Host scheduler: tick, sleep, repeat until cancelled."""
        self.logger.info(f"Reporting every {self.report_interval:.0f}s")
        while True:
            await self.tick()
            await asyncio.sleep(tick_interval)
