"""Error kinds raised by the provider-access layer and core logic.

Backends translate SDK-specific failures into these classes so core code
never inspects provider error codes.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for failures talking to the cloud provider."""


class ResourceNotFound(ProviderError):
    """The requested remote resource does not exist."""


class DuplicateResource(ProviderError):
    """The resource or rule being created already exists."""


class RemoteFailure(ProviderError):
    """Any other provider error. Keeps the provider code and message."""

    def __init__(self, message: str, code: str = ""):
        super().__init__(message)
        self.code = code


class OperationTimeout(ProviderError):
    """A bounded wait expired before the resource converged."""

    def __init__(self, message: str, resource_id: str):
        super().__init__(message)
        self.resource_id = resource_id


class OperationCancelled(ProviderError):
    """A wait was cancelled by the caller before it finished."""

    def __init__(self, message: str, resource_id: str):
        super().__init__(message)
        self.resource_id = resource_id


class ConfigurationError(ValueError):
    """Invalid static input, detected before any remote call."""
