"""Data Transfer Objects for the credential-management service API.

Envelope DTOs mirror the ``{"data": {...}}`` response bodies and only declare
the fields the client actually reads; anything else the service returns is
ignored.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ...domain.issuance.entities import CredentialAttribute


class _WireModel(BaseModel):
    """Base for camelCase wire models that are still constructible by field name."""

    model_config = ConfigDict(populate_by_name=True)


# Create invitation
class ConnectionRefDTO(_WireModel):
    id: str = Field(..., min_length=1)


class InvitationDataDTO(_WireModel):
    invitation_url: str = Field(..., alias="invitationUrl", min_length=1)
    connection: ConnectionRefDTO


class InvitationResponseDTO(_WireModel):
    """Response to ``POST /v1/invitation-url``."""

    data: InvitationDataDTO


# Connection status
class ConnectionRecordDTO(_WireModel):
    status: str


class ConnectionDataDTO(_WireModel):
    records: ConnectionRecordDTO


class ConnectionResponseDTO(_WireModel):
    """Response to ``GET /v1/connections/{connectionId}``."""

    data: ConnectionDataDTO


# Credential offer
class CredentialOfferRequestDTO(_WireModel):
    """Body of ``POST /v1/create-offer-credential``."""

    connection_id: str = Field(..., alias="connectionId")
    credential_definition_id: str = Field(..., alias="credentialDefinitionId")
    comment: str = ""
    attributes: List[CredentialAttribute]
    auto_accept_credential: str = Field("always", alias="autoAcceptCredential")


class CredentialOfferDataDTO(_WireModel):
    id: str = Field(..., min_length=1)


class CredentialOfferResponseDTO(_WireModel):
    """Response to ``POST /v1/create-offer-credential``."""

    data: CredentialOfferDataDTO


# Credential state
class CredentialDataDTO(_WireModel):
    state: str


class CredentialResponseDTO(_WireModel):
    """Response to ``GET /v1/credential/{credentialId}``."""

    data: CredentialDataDTO
