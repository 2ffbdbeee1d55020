from __future__ import annotations

import asyncio
import logging
import sys

from .application.issuance.use_cases.issuance import IssuanceService
from .domain.errors import IssuanceError
from .domain.issuance.entities import Invitation, IssuanceFlow
from .envs.issuance_env import Settings, get_settings
from .infrastructure.ocm.ocm_client import AsyncOcmClient

logger = logging.getLogger(__name__)


def present_invitation(invitation: Invitation) -> None:
    print(
        "Create a QR code from this URL and scan it with the wallet: "
        f"{invitation.invitation_url}"
    )


async def run(settings: Settings) -> IssuanceFlow:
    """Issue one credential using the given settings."""
    async with AsyncOcmClient(
        settings.ocm_base_url,
        endpoints=settings.endpoints(),
        timeout=settings.http_timeout_seconds,
    ) as client:
        service = IssuanceService(
            client,
            policy=settings.polling_policy(),
            on_invitation=present_invitation,
        )
        return await service.issue(
            settings.attributes, settings.credential_definition_id
        )


def main() -> None:
    """Main entry point for a single issuance run."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Issuing credential {settings.credential_definition_id}")
    print(f"Credential service: {settings.ocm_base_url}")

    try:
        flow = asyncio.run(run(settings))
    except IssuanceError:
        logger.exception("Issuance failed")
        sys.exit(1)

    print(
        f"Credential {flow.credential_id} delivered on connection {flow.connection_id}"
    )


if __name__ == "__main__":
    main()
