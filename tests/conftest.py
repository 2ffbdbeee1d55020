"""Shared pytest fixtures for issuance tests."""

from __future__ import annotations

import pytest

from credflow.domain.issuance.entities import CredentialAttribute, Invitation
from tests.fixtures import FakeClock

OCM_BASE_URL = "http://ocm.test"


@pytest.fixture
def ocm_base_url() -> str:
    """Base URL of the credential service faked by ``httpx.MockTransport``."""
    return OCM_BASE_URL


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def invitation() -> Invitation:
    return Invitation(
        invitation_url="https://wallet.example/inv/abc", connection_id="conn-1"
    )


@pytest.fixture
def attributes() -> list[CredentialAttribute]:
    """Claim set matching a course-completion credential definition."""
    return [
        CredentialAttribute(name="user_id", value="testuser@merlot-education.eu"),
        CredentialAttribute(name="course_name", value="Example Course"),
        CredentialAttribute(name="grade", value="15/15 - passed"),
        CredentialAttribute(name="variable_data", value="whatevs"),
    ]
