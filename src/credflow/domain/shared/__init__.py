"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .ocm_client_protocol import OcmClientProtocol

__all__ = ["OcmClientProtocol"]
