"""Boot-mode state machine: Auto-Connect or New-Setup, then ready."""

import logging
from typing import Optional

from sensornode.errors import ConfigMissingError
from sensornode.models.credentials import Credentials
from sensornode.models.status import BootMode, BootState, ErrorKind
from sensornode.services.console import InteractiveInput
from sensornode.services.credential_store import CredentialStore
from sensornode.services.network import NetworkConnector
from sensornode.services.uplink import UplinkClient

MENU = "Boot mode: [O] connect with saved settings, [N] new setup"


class BootOrchestrator:
    """Selects a boot mode and drives the node to a connected, configured state.

    selectingMode blocks on the console with no timeout and re-prompts on any
    line other than a single O/N. The wizard insists on a non-empty network
    name and upload key. autoConnecting never alters stored credentials and
    falls back to selectingMode on failure. newSetupWizard retries the
    connection until it succeeds, then persists the triple whether or not
    the upload key validates.
    """

    def __init__(
        self,
        store: CredentialStore,
        network: NetworkConnector,
        uplink: UplinkClient,
        console: InteractiveInput,
    ):
        self.logger = logging.getLogger("sensornode.boot")
        self.store = store
        self.network = network
        self.uplink = uplink
        self.console = console

        self.state: BootState = BootState.SELECTING_MODE
        self.last_error: Optional[ErrorKind] = None
        self.credentials: Optional[Credentials] = None
        self.wizard_attempts: int = 0

    def _fail(self, kind: ErrorKind, message: str) -> None:
        self.last_error = kind
        self.console.say(message)
        self.logger.warning(f"{kind.value}: {message}")

    async def select_mode(self) -> BootMode:
        """Show the menu and read one selection line."""
        self.console.say(MENU)
        mode = BootMode.from_key(await self.console.read_line("> "))
        if mode == BootMode.INVALID:
            self._fail(ErrorKind.INVALID_SELECTION, "Invalid option, press O or N.")
        else:
            self.logger.info(f"Boot mode selected: {mode.value}")
        return mode

    async def step(self) -> BootState:
        """Advance the state machine by one transition.

        Returns:
            State after the transition
        """
        if self.state == BootState.SELECTING_MODE:
            mode = await self.select_mode()
            if mode == BootMode.AUTO_CONNECT:
                self.state = BootState.AUTO_CONNECTING
            elif mode == BootMode.NEW_SETUP:
                self.state = BootState.NEW_SETUP_WIZARD
        elif self.state == BootState.AUTO_CONNECTING:
            await self._auto_connect()
        elif self.state == BootState.NEW_SETUP_WIZARD:
            await self._new_setup()

        return self.state

    async def run(self) -> Credentials:
        """Run until ready.

        Returns:
            Copy of the validated credential triple, for ReportLoop
        """
        self.logger.info("Boot started")
        while self.state != BootState.READY:
            await self.step()
        self.logger.info(f"Boot complete, network '{self.credentials.network_name}'")
        return self.credentials.model_copy()

    async def _auto_connect(self) -> None:
        try:
            credentials = self.store.load()
        except ConfigMissingError as e:
            self.logger.debug(str(e))
            self._fail(
                ErrorKind.CONFIG_MISSING,
                "No saved configuration found. Choose N for new setup.",
            )
            self.state = BootState.SELECTING_MODE
            return

        self.console.say(f"Connecting to {credentials.network_name}...")
        if not await self.network.connect(credentials.network_name, credentials.network_secret):
            self._fail(
                ErrorKind.CONNECT_FAILURE,
                "Could not connect with saved settings. Choose N to set up again.",
            )
            self.state = BootState.SELECTING_MODE
            return

        self.console.say("Connected.")
        self.credentials = credentials
        self.last_error = None
        self.state = BootState.READY

    async def _read_required(self, prompt: str) -> str:
        """Re-prompt until the operator enters a non-empty value."""
        while True:
            value = await self.console.read_line(prompt)
            if value:
                return value
            self.console.say("A value is required.")

    async def _new_setup(self) -> None:
        network_name = await self._read_required("Network name: ")
        # Blank secret is allowed for open networks
        network_secret = await self.console.read_line("Network password: ", masked=True)

        # No way out of the wizard without a working network
        self.wizard_attempts = 0
        while True:
            self.wizard_attempts += 1
            self.console.say(f"Connecting to {network_name}...")
            if await self.network.connect(network_name, network_secret):
                break
            self._fail(ErrorKind.CONNECT_FAILURE, "Connection failed, retrying...")
        self.console.say("Connected.")
        self.last_error = None

        upload_key = await self._read_required("Upload key: ")
        result = await self.uplink.validate(upload_key)
        if result.accepted:
            self.console.say("Upload key accepted.")
        else:
            # Setup continues with an unvalidated key
            self.last_error = ErrorKind.UPLOAD_REJECTED
            self.console.say(f"Warning: upload key not accepted (HTTP {result.status_code}), saving anyway.")
            self.logger.warning(f"Upload key validation returned HTTP {result.status_code}")

        credentials = Credentials(
            network_name=network_name,
            network_secret=network_secret,
            upload_key=upload_key,
        )
        self.store.save(credentials)
        self.credentials = credentials
        self.state = BootState.READY
