"""Upload result model."""

from typing import Optional
from pydantic import BaseModel, Field

HTTP_OK = 200
TRANSPORT_FAILURE = -1


class UploadResult(BaseModel):
    """Outcome of one uplink request.

    Ephemeral: produced per attempt, consumed for logging and branching,
    never persisted.
    """

    status_code: int = Field(..., description="HTTP status, or -1 on transport failure")
    error: Optional[str] = Field(None, description="Transport error text, if any")

    @property
    def accepted(self) -> bool:
        """Only HTTP 200 counts as accepted."""
        return self.status_code == HTTP_OK
