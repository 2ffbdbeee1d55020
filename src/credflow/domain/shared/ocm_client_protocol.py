"""Protocol interface for credential-service client implementations.

The orchestrator depends on this contract only, so it can be driven by the
HTTP client in production and by scripted fakes in tests.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from ..issuance.entities import CredentialAttribute, Invitation


class OcmClientProtocol(Protocol):
    """The four operations exposed by the credential-management service."""

    async def create_invitation(self, endpoint: Optional[str] = None) -> Invitation:
        """Create an invitation and the pending connection behind it."""
        ...

    async def get_connection_status(
        self, connection_id: str, endpoint: Optional[str] = None
    ) -> str:
        """Return the current status string of a connection."""
        ...

    async def create_credential_offer(
        self,
        connection_id: str,
        attributes: Sequence[CredentialAttribute],
        credential_definition_id: str,
        endpoint: Optional[str] = None,
    ) -> str:
        """Offer a credential over a trusted connection and return its id."""
        ...

    async def get_credential_state(
        self, credential_id: str, endpoint: Optional[str] = None
    ) -> str:
        """Return the current state string of a credential."""
        ...
