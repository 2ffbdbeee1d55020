"""Domain-specific exceptions."""

from __future__ import annotations

from typing import Optional


class IssuanceError(Exception):
    """Base class for every failure raised by an issuance flow."""


class TransportError(IssuanceError):
    """Raised when an HTTP exchange with the credential service fails.

    Covers network failures, non-successful status codes and bodies that
    are not valid JSON.
    """

    def __init__(
        self, message: str, url: str, status_code: Optional[int] = None
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(IssuanceError):
    """Raised when a response envelope lacks the fields an operation needs."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"Malformed response for {operation}: {detail}")


class PollingTimeoutError(IssuanceError):
    """Raised when a polling loop runs out of attempts or time."""

    def __init__(self, subject: str, attempts: int, last_value: Optional[str]) -> None:
        self.subject = subject
        self.attempts = attempts
        self.last_value = last_value
        super().__init__(
            f"Gave up waiting on {subject} after {attempts} polls "
            f"(last value: {last_value!r})"
        )


class FailureStateError(IssuanceError):
    """Raised when the service reports a state configured as a failure."""

    def __init__(self, subject: str, state: str) -> None:
        self.subject = subject
        self.state = state
        super().__init__(f"{subject} reached failure state {state!r}")


class InvalidFlowStateError(IssuanceError):
    """Raised when a flow step is invoked out of order."""
