from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from ..application.issuance.use_cases.polling import PollingPolicy
from ..domain.issuance.entities import CredentialAttribute
from ..infrastructure.ocm.ocm_client import OcmEndpoints

_DEFAULT_ENDPOINTS = OcmEndpoints()


class Settings(BaseModel):
    """Typed settings for one issuance run, built from environment variables."""

    ocm_base_url: str
    credential_definition_id: str = Field(..., min_length=1)
    attributes: list[CredentialAttribute] = Field(..., min_length=1)

    # Endpoint overrides, relative to ocm_base_url or absolute
    invitation_endpoint: str = _DEFAULT_ENDPOINTS.invitation
    connections_endpoint: str = _DEFAULT_ENDPOINTS.connections
    credential_offer_endpoint: str = _DEFAULT_ENDPOINTS.credential_offer
    credential_endpoint: str = _DEFAULT_ENDPOINTS.credential

    # Timing
    invitation_grace_ms: int = Field(5000, ge=0)
    poll_interval_ms: int = Field(2500, ge=0)
    poll_max_attempts: Optional[int] = Field(None, ge=1)
    poll_deadline_seconds: Optional[float] = Field(None, gt=0)
    http_timeout_seconds: float = Field(10.0, gt=0)

    # Service-reported states that abort a wait instead of polling on
    connection_failure_states: list[str] = []
    credential_failure_states: list[str] = []

    log_level: str = "INFO"

    @field_validator("ocm_base_url")
    @classmethod
    def validate_ocm_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("OCM base URL cannot be empty")
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("OCM base URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("OCM base URL must include a host")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def endpoints(self) -> OcmEndpoints:
        return OcmEndpoints(
            invitation=self.invitation_endpoint,
            connections=self.connections_endpoint,
            credential_offer=self.credential_offer_endpoint,
            credential=self.credential_endpoint,
        )

    def polling_policy(self) -> PollingPolicy:
        return PollingPolicy(
            initial_delay_seconds=self.invitation_grace_ms / 1000.0,
            interval_seconds=self.poll_interval_ms / 1000.0,
            max_attempts=self.poll_max_attempts,
            deadline_seconds=self.poll_deadline_seconds,
            connection_failure_states=frozenset(self.connection_failure_states),
            credential_failure_states=frozenset(self.credential_failure_states),
        )


def _split(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _load_attributes(raw: Optional[str], path: Optional[str]) -> list[dict]:
    if raw:
        source = raw
    elif path:
        source = Path(path).read_text(encoding="utf-8")
    else:
        raise ValueError("CREDENTIAL_ATTRIBUTES or CREDENTIAL_ATTRIBUTES_FILE is required")
    try:
        attributes = json.loads(source)
    except json.JSONDecodeError as e:
        raise ValueError(f"Credential attributes are not valid JSON: {e}") from e
    if not isinstance(attributes, list):
        raise ValueError("Credential attributes must be a JSON list of {name, value}")
    return attributes


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    ocm_base_url = os.environ.get("OCM_BASE_URL")
    credential_definition_id = os.environ.get("CREDENTIAL_DEFINITION_ID")
    if not (ocm_base_url and credential_definition_id):
        raise ValueError("OCM_BASE_URL and CREDENTIAL_DEFINITION_ID are required")

    max_attempts = os.environ.get("POLL_MAX_ATTEMPTS")
    deadline = os.environ.get("POLL_DEADLINE_SECONDS")
    return Settings(
        ocm_base_url=ocm_base_url,
        credential_definition_id=credential_definition_id,
        attributes=_load_attributes(
            os.environ.get("CREDENTIAL_ATTRIBUTES"),
            os.environ.get("CREDENTIAL_ATTRIBUTES_FILE"),
        ),
        invitation_endpoint=os.environ.get(
            "OCM_INVITATION_ENDPOINT", _DEFAULT_ENDPOINTS.invitation
        ),
        connections_endpoint=os.environ.get(
            "OCM_CONNECTIONS_ENDPOINT", _DEFAULT_ENDPOINTS.connections
        ),
        credential_offer_endpoint=os.environ.get(
            "OCM_CREDENTIAL_OFFER_ENDPOINT", _DEFAULT_ENDPOINTS.credential_offer
        ),
        credential_endpoint=os.environ.get(
            "OCM_CREDENTIAL_ENDPOINT", _DEFAULT_ENDPOINTS.credential
        ),
        invitation_grace_ms=int(os.environ.get("INVITATION_GRACE_MS", "5000")),
        poll_interval_ms=int(os.environ.get("POLL_INTERVAL_MS", "2500")),
        poll_max_attempts=int(max_attempts) if max_attempts else None,
        poll_deadline_seconds=float(deadline) if deadline else None,
        http_timeout_seconds=float(os.environ.get("HTTP_TIMEOUT_SECONDS", "10.0")),
        connection_failure_states=_split(os.environ.get("CONNECTION_FAILURE_STATES")),
        credential_failure_states=_split(os.environ.get("CREDENTIAL_FAILURE_STATES")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )
