"""Use cases for issuing a credential to a wallet."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Awaitable, Callable, Optional, Sequence, Union

from ....domain.errors import InvalidFlowStateError
from ....domain.issuance.entities import (
    DONE,
    TRUSTED,
    CredentialAttribute,
    FlowStage,
    Invitation,
    IssuanceFlow,
)
from ....domain.shared import OcmClientProtocol
from .polling import Clock, PollingPolicy, Sleep, poll_until

logger = logging.getLogger(__name__)

InvitationHandler = Callable[[Invitation], Union[None, Awaitable[None]]]


class IssuanceService:
    """Service orchestrating the invitation, connection and issuance flow.

    START -> INVITED -> CONNECTED -> OFFERED -> ISSUED, one step per method.
    Each step takes the flow returned by the previous one and refuses to run
    out of order.
    """

    def __init__(
        self,
        client: OcmClientProtocol,
        policy: Optional[PollingPolicy] = None,
        on_invitation: Optional[InvitationHandler] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
    ):
        self.client = client
        self.policy = policy or PollingPolicy()
        self.on_invitation = on_invitation
        self._sleep = sleep
        self._clock = clock

    @staticmethod
    def _require(flow: IssuanceFlow, stage: FlowStage, step: str) -> None:
        if flow.stage != stage:
            raise InvalidFlowStateError(
                f"Cannot {step} while flow is {flow.stage.value}; expected {stage.value}"
            )

    async def start(self) -> IssuanceFlow:
        """Create the invitation and hand it to the operator."""
        invitation = await self.client.create_invitation()
        logger.info(
            "Invitation created for connection %s: %s",
            invitation.connection_id,
            invitation.invitation_url,
        )
        if self.on_invitation is not None:
            result = self.on_invitation(invitation)
            if inspect.isawaitable(result):
                await result
        return IssuanceFlow().advance(FlowStage.INVITED, invitation=invitation)

    async def wait_for_connection(self, flow: IssuanceFlow) -> IssuanceFlow:
        """Give the operator time to present the invitation, then wait for trust."""
        self._require(flow, FlowStage.INVITED, "wait for connection")
        connection_id = flow.connection_id
        assert connection_id is not None

        await self._sleep(self.policy.initial_delay_seconds)
        result = await poll_until(
            lambda: self.client.get_connection_status(connection_id),
            subject=f"connection {connection_id}",
            terminal=TRUSTED,
            interval_seconds=self.policy.interval_seconds,
            failure_states=self.policy.connection_failure_states,
            max_attempts=self.policy.max_attempts,
            deadline_seconds=self.policy.deadline_seconds,
            sleep=self._sleep,
            clock=self._clock,
        )
        return flow.advance(
            FlowStage.CONNECTED,
            connection_status=result.value,
            connection_polls=result.attempts,
        )

    async def offer_credential(
        self,
        flow: IssuanceFlow,
        attributes: Sequence[CredentialAttribute],
        credential_definition_id: str,
    ) -> IssuanceFlow:
        self._require(flow, FlowStage.CONNECTED, "offer a credential")
        connection_id = flow.connection_id
        assert connection_id is not None

        credential_id = await self.client.create_credential_offer(
            connection_id, attributes, credential_definition_id
        )
        logger.info(
            "Credential %s offered on connection %s", credential_id, connection_id
        )
        return flow.advance(FlowStage.OFFERED, credential_id=credential_id)

    async def wait_for_credential(self, flow: IssuanceFlow) -> IssuanceFlow:
        """Wait until the wallet has accepted and stored the credential."""
        self._require(flow, FlowStage.OFFERED, "wait for credential")
        credential_id = flow.credential_id
        assert credential_id is not None

        result = await poll_until(
            lambda: self.client.get_credential_state(credential_id),
            subject=f"credential {credential_id}",
            terminal=DONE,
            interval_seconds=self.policy.interval_seconds,
            failure_states=self.policy.credential_failure_states,
            max_attempts=self.policy.max_attempts,
            deadline_seconds=self.policy.deadline_seconds,
            sleep=self._sleep,
            clock=self._clock,
        )
        return flow.advance(
            FlowStage.ISSUED,
            credential_state=result.value,
            credential_polls=result.attempts,
        )

    async def issue(
        self,
        attributes: Sequence[CredentialAttribute],
        credential_definition_id: str,
    ) -> IssuanceFlow:
        """Run a complete flow and return it in the ISSUED stage."""
        flow = await self.start()
        flow = await self.wait_for_connection(flow)
        flow = await self.offer_credential(flow, attributes, credential_definition_id)
        flow = await self.wait_for_credential(flow)
        logger.info(
            "Credential %s issued on connection %s",
            flow.credential_id,
            flow.connection_id,
        )
        return flow
