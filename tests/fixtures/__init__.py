"""Test fixtures: scripted credential-service client and a recording clock."""

from .scripted_ocm_client import ScriptedOcmClient
from .fake_clock import FakeClock

__all__ = ["ScriptedOcmClient", "FakeClock"]
