"""Status enums for the sensor node agent."""

from enum import Enum


class ConnectionState(str, Enum):
    """Radio association state, owned by NetworkConnector."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class BootMode(str, Enum):
    """Operator's boot-menu choice, derived from one keystroke."""

    AUTO_CONNECT = "autoConnect"
    NEW_SETUP = "newSetup"
    INVALID = "invalid"

    @classmethod
    def from_key(cls, key: str) -> "BootMode":
        """Map one trimmed console line to a boot mode.

        Only a single O or N (any case) selects a mode; longer lines such as
        "no" or "Oops" are invalid.
        """
        key = key.strip().upper()
        if key == "O":
            return cls.AUTO_CONNECT
        if key == "N":
            return cls.NEW_SETUP
        return cls.INVALID


class BootState(str, Enum):
    """BootOrchestrator states.

    State transitions:
    selectingMode → autoConnecting ──→ ready
          ↑   ↑           │
          │   └───────────┘  (config missing / connect failure)
          └──→ newSetupWizard → ready
    """

    SELECTING_MODE = "selectingMode"
    AUTO_CONNECTING = "autoConnecting"
    NEW_SETUP_WIZARD = "newSetupWizard"
    READY = "ready"


class ErrorKind(str, Enum):
    """Recoverable failure kinds. None of them halts the node."""

    CONFIG_MISSING = "configMissing"
    CONNECT_FAILURE = "connectFailure"
    UPLOAD_REJECTED = "uploadRejected"
    INVALID_SELECTION = "invalidSelection"
