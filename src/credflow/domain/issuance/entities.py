"""Issuance domain entities: Invitation, CredentialAttribute and IssuanceFlow."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

TRUSTED = "trusted"
DONE = "done"


class FlowStage(str, Enum):
    """Stages of one issuance flow, in the only order they can occur."""

    START = "START"
    INVITED = "INVITED"
    CONNECTED = "CONNECTED"
    OFFERED = "OFFERED"
    ISSUED = "ISSUED"


class Invitation(BaseModel):
    """Wallet-consumable invitation plus the connection it will establish."""

    model_config = ConfigDict(frozen=True)

    invitation_url: str = Field(..., min_length=1)
    connection_id: str = Field(..., min_length=1)


class CredentialAttribute(BaseModel):
    """One claim of a credential offer."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    value: str


class IssuanceFlow(BaseModel):
    """Everything the client knows about a single flow.

    Steps never mutate a flow; they return an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    stage: FlowStage = FlowStage.START
    invitation: Optional[Invitation] = None
    connection_status: Optional[str] = None
    credential_id: Optional[str] = None
    credential_state: Optional[str] = None
    connection_polls: int = 0
    credential_polls: int = 0

    @property
    def connection_id(self) -> Optional[str]:
        return self.invitation.connection_id if self.invitation else None

    def advance(self, stage: FlowStage, **changes: object) -> "IssuanceFlow":
        """Return a copy moved to ``stage`` with ``changes`` applied."""
        return self.model_copy(update={"stage": stage, **changes})
