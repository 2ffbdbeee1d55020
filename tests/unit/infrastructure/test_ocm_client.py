"""Unit tests for the credential-service HTTP client."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from credflow.domain.errors import MalformedResponseError, TransportError
from credflow.domain.issuance.entities import CredentialAttribute
from credflow.infrastructure.ocm.ocm_client import AsyncOcmClient, OcmEndpoints


class RecordingHandler:
    """MockTransport handler that records requests and replies with fixed JSON."""

    def __init__(self, body: Any, status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


def make_client(
    base_url: str,
    handler: Callable[[httpx.Request], httpx.Response],
    endpoints: OcmEndpoints | None = None,
) -> AsyncOcmClient:
    return AsyncOcmClient(
        base_url, endpoints=endpoints, transport=httpx.MockTransport(handler)
    )


class TestCreateInvitation:
    @pytest.mark.asyncio
    async def test_returns_invitation_from_envelope(self, ocm_base_url: str) -> None:
        handler = RecordingHandler(
            {
                "data": {
                    "invitationUrl": "https://wallet.example/inv/abc",
                    "connection": {"id": "conn-1", "status": "invited"},
                },
                "statusCode": 200,
            }
        )
        async with make_client(ocm_base_url, handler) as client:
            invitation = await client.create_invitation()

        assert invitation.invitation_url == "https://wallet.example/inv/abc"
        assert invitation.connection_id == "conn-1"

        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/invitation-url"
        assert request.url.params["alias"] == "trust"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_connection_id_is_taken_verbatim(self, ocm_base_url: str) -> None:
        connection_id = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
        handler = RecordingHandler(
            {"data": {"invitationUrl": "didcomm://x", "connection": {"id": connection_id}}}
        )
        async with make_client(ocm_base_url, handler) as client:
            invitation = await client.create_invitation()

        assert invitation.connection_id == connection_id

    @pytest.mark.asyncio
    async def test_missing_connection_raises_malformed(self, ocm_base_url: str) -> None:
        handler = RecordingHandler({"data": {"invitationUrl": "didcomm://x"}})
        async with make_client(ocm_base_url, handler) as client:
            with pytest.raises(MalformedResponseError) as exc_info:
                await client.create_invitation()

        assert exc_info.value.operation == "create_invitation"

    @pytest.mark.asyncio
    async def test_explicit_endpoint_overrides_configured_one(
        self, ocm_base_url: str
    ) -> None:
        handler = RecordingHandler(
            {"data": {"invitationUrl": "didcomm://x", "connection": {"id": "c"}}}
        )
        async with make_client(ocm_base_url, handler) as client:
            await client.create_invitation("https://other.test/v2/invite")

        assert str(handler.requests[0].url) == "https://other.test/v2/invite"


class TestGetConnectionStatus:
    @pytest.mark.asyncio
    async def test_appends_connection_id_to_endpoint(self, ocm_base_url: str) -> None:
        handler = RecordingHandler({"data": {"records": {"status": "trusted"}}})
        async with make_client(ocm_base_url, handler) as client:
            status = await client.get_connection_status("conn-1")

        assert status == "trusted"
        assert handler.requests[0].method == "GET"
        assert handler.requests[0].url.path == "/v1/connections/conn-1"

    @pytest.mark.asyncio
    async def test_configured_endpoint_is_used(self, ocm_base_url: str) -> None:
        handler = RecordingHandler({"data": {"records": {"status": "not-yet-trusted"}}})
        endpoints = OcmEndpoints(connections="/api/conn/")
        async with make_client(ocm_base_url, handler, endpoints) as client:
            status = await client.get_connection_status("conn-9")

        assert status == "not-yet-trusted"
        assert handler.requests[0].url.path == "/api/conn/conn-9"

    @pytest.mark.asyncio
    async def test_missing_records_raises_malformed(self, ocm_base_url: str) -> None:
        handler = RecordingHandler({"data": {}})
        async with make_client(ocm_base_url, handler) as client:
            with pytest.raises(MalformedResponseError):
                await client.get_connection_status("conn-1")


class TestCreateCredentialOffer:
    @pytest.mark.asyncio
    async def test_payload_carries_attributes_in_order(
        self, ocm_base_url: str, attributes: list[CredentialAttribute]
    ) -> None:
        handler = RecordingHandler({"data": {"id": "cred-1", "state": "offer-sent"}})
        async with make_client(ocm_base_url, handler) as client:
            credential_id = await client.create_credential_offer(
                "conn-1", attributes, "cred-def:1"
            )

        assert credential_id == "cred-1"
        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/create-offer-credential"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {
            "connectionId": "conn-1",
            "credentialDefinitionId": "cred-def:1",
            "comment": "",
            "attributes": [
                {"name": "user_id", "value": "testuser@merlot-education.eu"},
                {"name": "course_name", "value": "Example Course"},
                {"name": "grade", "value": "15/15 - passed"},
                {"name": "variable_data", "value": "whatevs"},
            ],
            "autoAcceptCredential": "always",
        }

    @pytest.mark.asyncio
    async def test_missing_id_raises_malformed(
        self, ocm_base_url: str, attributes: list[CredentialAttribute]
    ) -> None:
        handler = RecordingHandler({"data": {"state": "offer-sent"}})
        async with make_client(ocm_base_url, handler) as client:
            with pytest.raises(MalformedResponseError) as exc_info:
                await client.create_credential_offer("conn-1", attributes, "def")

        assert exc_info.value.operation == "create_credential_offer"


class TestGetCredentialState:
    @pytest.mark.asyncio
    async def test_appends_credential_id_to_endpoint(self, ocm_base_url: str) -> None:
        handler = RecordingHandler({"data": {"state": "done"}})
        async with make_client(ocm_base_url, handler) as client:
            state = await client.get_credential_state("cred-1")

        assert state == "done"
        assert handler.requests[0].url.path == "/v1/credential/cred-1"

    @pytest.mark.asyncio
    async def test_non_string_state_raises_malformed(self, ocm_base_url: str) -> None:
        handler = RecordingHandler({"data": {"state": None}})
        async with make_client(ocm_base_url, handler) as client:
            with pytest.raises(MalformedResponseError):
                await client.get_credential_state("cred-1")


class TestTransportFailures:
    @pytest.mark.asyncio
    async def test_http_error_status_raises_transport_error(
        self, ocm_base_url: str
    ) -> None:
        handler = RecordingHandler({"message": "not found"}, status_code=404)
        async with make_client(ocm_base_url, handler) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.get_connection_status("missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url.endswith("/v1/connections/missing")

    @pytest.mark.asyncio
    async def test_non_json_body_raises_transport_error(
        self, ocm_base_url: str
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        async with make_client(ocm_base_url, handler) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.get_credential_state("cred-1")

        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_network_failure_raises_transport_error(
        self, ocm_base_url: str
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(ocm_base_url, handler) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.create_invitation()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_redirect_is_followed(self, ocm_base_url: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/credential/cred-1":
                return httpx.Response(
                    307, headers={"Location": f"{ocm_base_url}/v2/credential/cred-1"}
                )
            return httpx.Response(200, json={"data": {"state": "done"}})

        async with make_client(ocm_base_url, handler) as client:
            assert await client.get_credential_state("cred-1") == "done"
