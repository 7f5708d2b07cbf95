"""Entry point for the sensor node agent."""

import asyncio
import logging
from typing import Optional

from sensornode.config import NodeSettings
from sensornode.services.boot import BootOrchestrator
from sensornode.services.console import InteractiveInput
from sensornode.services.credential_store import CredentialStore
from sensornode.services.network import NetworkConnector
from sensornode.services.radio import NmcliRadio, RadioDriver
from sensornode.services.report_loop import ReportLoop
from sensornode.services.uplink import UplinkClient
from sensornode.utils.logging import setup_logger


async def run(
    settings: NodeSettings,
    radio: Optional[RadioDriver] = None,
    console: Optional[InteractiveInput] = None,
) -> None:
    """Boot, then report until cancelled.

    Boot completes fully before the first report tick.

    Args:
        settings: Runtime settings
        radio: Radio driver (default: NmcliRadio on settings.interface)
        console: Operator console (default: stdin/stdout)
    """
    logger = logging.getLogger("sensornode")

    store = CredentialStore(settings.storage_dir, settings.storage_namespace)
    network = NetworkConnector(
        radio or NmcliRadio(settings.interface),
        attempts=settings.connect_attempts,
        interval=settings.connect_interval,
    )
    uplink = UplinkClient(settings.endpoint, timeout=settings.http_timeout)

    orchestrator = BootOrchestrator(store, network, uplink, console or InteractiveInput())
    credentials = await orchestrator.run()

    loop = ReportLoop(
        credentials,
        network,
        uplink,
        report_interval=settings.report_interval,
        measurement_range=(settings.measurement_min, settings.measurement_max),
    )
    logger.info("Entering report loop")
    await loop.run_forever(settings.tick_interval)


def main():
    """Main entry point (console script `sensornode`)."""
    settings = NodeSettings.from_env()
    logger = setup_logger(settings)
    logger.info(f"Sensor node starting, endpoint={settings.endpoint}")

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        pass
    finally:
        logger.info("Sensor node shutting down...")


if __name__ == "__main__":
    main()
