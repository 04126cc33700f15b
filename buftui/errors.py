"""Error taxonomy shared by the resolver, fetch layer, and navigator.

Locator errors are recoverable and stay at the prompt.
Fetch, protocol, and unsupported-resource errors end the session in the
errored state and are shown verbatim.
"""

from __future__ import annotations


class BuftuiError(Exception):
    """Base class for all buftui errors."""


class LocatorError(BuftuiError):
    """Locator text could not be turned into a usable request."""


class LocatorSyntaxError(LocatorError):
    """Locator text does not match ``[<remote>/]<owner>/<module>[:<ref>]``."""


class LocatorValidationError(LocatorError):
    """Locator is well-formed but a field breaks a validation rule."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"invalid {field}: {message}")
        self.field = field


class FetchFailure(BuftuiError):
    """Transport or remote failure while talking to the registry."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ProtocolError(BuftuiError):
    """Registry answered with a structurally unexpected response."""


class UnsupportedResourceError(BuftuiError):
    """Resolved resource kind has no browsing state."""


class CredentialError(BuftuiError):
    """Credentials for the remote are missing or inconsistent."""


__all__ = [
    "BuftuiError",
    "CredentialError",
    "FetchFailure",
    "LocatorError",
    "LocatorSyntaxError",
    "LocatorValidationError",
    "ProtocolError",
    "UnsupportedResourceError",
]
