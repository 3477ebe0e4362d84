"""Relay error taxonomy.

Every failure is terminal for the request. Each error knows its HTTP
status and the JSON body the API layer sends back.
"""

from typing import Any


class RelayError(Exception):
    """Base class for errors surfaced to HTTP callers."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def payload(self) -> dict[str, Any]:
        return {"error": self.message}


class InvalidInput(RelayError):
    """Caller error: missing or empty field."""
    status_code = 400


class ConfigError(RelayError):
    """Deployment error: no model credential configured."""
    pass


class UpstreamError(RelayError):
    """Provider or network failure during the model call."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.details = details

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}


class MalformedUpstreamOutput(RelayError):
    """Model text that is not a valid bundle after fence stripping."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "raw": self.raw}


class UpstreamProtocolExceeded(RelayError):
    """Model kept issuing function calls past the round-trip bound."""

    def __init__(self, message: str, round_trips: int):
        super().__init__(message)
        self.round_trips = round_trips
