from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Type, TypeVar
from types import TracebackType

import httpx
from pydantic import BaseModel, ValidationError

from ...application.issuance.dtos import (
    ConnectionResponseDTO,
    CredentialOfferRequestDTO,
    CredentialOfferResponseDTO,
    CredentialResponseDTO,
    InvitationResponseDTO,
)
from ...domain.errors import MalformedResponseError
from ...domain.issuance.entities import CredentialAttribute, Invitation
from ..http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)

_DTO = TypeVar("_DTO", bound=BaseModel)


@dataclass(frozen=True)
class OcmEndpoints:
    """Per-operation endpoints, relative to the base URL or absolute.

    Status endpoints are prefixes: the connection or credential id is
    appended verbatim.
    """

    invitation: str = "/v1/invitation-url?alias=trust"
    connections: str = "/v1/connections/"
    credential_offer: str = "/v1/create-offer-credential"
    credential: str = "/v1/credential/"


def _parse(dto_cls: Type[_DTO], operation: str, body: Any) -> _DTO:
    try:
        return dto_cls.model_validate(body)
    except ValidationError as e:
        raise MalformedResponseError(operation, str(e)) from e


class AsyncOcmClient:
    """Asynchronous client for the credential-management service HTTP API.

    Every method performs exactly one request; retry and polling policy
    belong to the caller.
    """

    def __init__(
        self,
        base_url: str,
        endpoints: Optional[OcmEndpoints] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._endpoints = endpoints or OcmEndpoints()
        self._http = AsyncHttpClient(base_url, timeout=timeout, transport=transport)

    async def create_invitation(self, endpoint: Optional[str] = None) -> Invitation:
        body = await self._http.post_json(endpoint or self._endpoints.invitation)
        dto = _parse(InvitationResponseDTO, "create_invitation", body)
        invitation = Invitation(
            invitation_url=dto.data.invitation_url,
            connection_id=dto.data.connection.id,
        )
        logger.debug("Created invitation for connection %s", invitation.connection_id)
        return invitation

    async def get_connection_status(
        self, connection_id: str, endpoint: Optional[str] = None
    ) -> str:
        prefix = endpoint or self._endpoints.connections
        body = await self._http.get_json(f"{prefix}{connection_id}")
        dto = _parse(ConnectionResponseDTO, "get_connection_status", body)
        return dto.data.records.status

    async def create_credential_offer(
        self,
        connection_id: str,
        attributes: Sequence[CredentialAttribute],
        credential_definition_id: str,
        endpoint: Optional[str] = None,
    ) -> str:
        request = CredentialOfferRequestDTO(
            connection_id=connection_id,
            credential_definition_id=credential_definition_id,
            attributes=list(attributes),
        )
        body = await self._http.post_json(
            endpoint or self._endpoints.credential_offer,
            json=request.model_dump(by_alias=True),
        )
        dto = _parse(CredentialOfferResponseDTO, "create_credential_offer", body)
        logger.debug(
            "Offered credential %s on connection %s", dto.data.id, connection_id
        )
        return dto.data.id

    async def get_credential_state(
        self, credential_id: str, endpoint: Optional[str] = None
    ) -> str:
        prefix = endpoint or self._endpoints.credential
        body = await self._http.get_json(f"{prefix}{credential_id}")
        dto = _parse(CredentialResponseDTO, "get_credential_state", body)
        return dto.data.state

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncOcmClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
