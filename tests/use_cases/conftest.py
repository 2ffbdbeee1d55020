"""Pytest fixtures for issuance story tests."""

from __future__ import annotations

import pytest

from credflow.application.issuance.use_cases.issuance import IssuanceService
from credflow.application.issuance.use_cases.polling import PollingPolicy
from credflow.domain.issuance.entities import Invitation
from tests.fixtures import FakeClock, ScriptedOcmClient


@pytest.fixture
def scripted_client(invitation: Invitation) -> ScriptedOcmClient:
    """Client replaying the reference scenario of a successful issuance."""
    return ScriptedOcmClient(
        invitation=invitation,
        connection_statuses=["pending", "pending", "trusted"],
        credential_id="cred-1",
        credential_states=["offer-sent", "done"],
    )


@pytest.fixture
def issuance_service(
    scripted_client: ScriptedOcmClient, fake_clock: FakeClock
) -> IssuanceService:
    return IssuanceService(
        scripted_client,
        policy=PollingPolicy(),
        sleep=fake_clock.sleep,
        clock=fake_clock.monotonic,
    )
