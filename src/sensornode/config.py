"""Runtime settings for the sensor node agent."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, model_validator

ENV_PREFIX = "SENSORNODE_"


class NodeSettings(BaseModel):
    """Timing constants, uplink endpoint and storage location.

    Defaults reproduce the device firmware: 20 connect polls every 500 ms
    (10 s ceiling) and one report every 15 s.
    """

    endpoint: str = Field(
        "http://api.thingspeak.com/update",
        pattern=r"^https?://.+",
        description="Uplink endpoint; api_key and field1 are appended as query parameters",
    )
    connect_attempts: int = Field(20, gt=0, description="Status polls per connect")
    connect_interval: float = Field(0.5, ge=0, description="Seconds between status polls; 0 polls back to back")
    report_interval: float = Field(15.0, gt=0, description="Seconds between report attempts")
    tick_interval: float = Field(1.0, ge=0, description="Seconds between ReportLoop ticks; 0 yields only")
    http_timeout: float = Field(10.0, gt=0, description="Uplink request timeout in seconds")
    storage_dir: str = Field("./data", description="Directory holding credential namespaces")
    storage_namespace: str = Field("sensornode", pattern=r"^[A-Za-z0-9_-]+$")
    interface: str = Field("wlan0", description="Wireless interface for the host radio driver")
    log_file: str = Field("./logs/sensornode.log")
    log_level: str = Field("INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR)$")
    log_max_bytes: int = Field(10 * 1024 * 1024, gt=0, description="Log file size before rotation")
    log_backup_count: int = Field(3, ge=0, description="Rotated log files kept")
    measurement_min: int = Field(10, description="Lowest placeholder measurement (inclusive)")
    measurement_max: int = Field(60, description="Measurement upper bound (exclusive)")

    @model_validator(mode="after")
    def check_measurement_range(self) -> "NodeSettings":
        """Require a non-empty half-open measurement range."""
        if self.measurement_min >= self.measurement_max:
            raise ValueError("measurement_min must be lower than measurement_max")
        return self

    @property
    def connect_ceiling(self) -> float:
        """Worst-case seconds spent polling for one connect."""
        return self.connect_attempts * self.connect_interval

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "NodeSettings":
        """Build settings from SENSORNODE_* environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Raises:
            pydantic.ValidationError: If an override has an invalid value
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for name in cls.model_fields:
            value = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                overrides[name] = value
        return cls.model_validate(overrides)
