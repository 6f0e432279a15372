"""Provider error hierarchy.

All upstream failures inherit from UpstreamUnavailable. The HTTP client
raises them internally and absorbs them at its fetch() boundary, so the
aggregator only ever sees an empty result.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base exception for all provider-related errors."""


class UpstreamUnavailable(ProviderError):
    """The upstream generator could not supply numbers this round."""


class ProviderConnectionError(UpstreamUnavailable):
    """Network failure reaching the upstream generator."""


class ProviderTimeoutError(UpstreamUnavailable):
    """Upstream did not answer within the per-call timeout."""


class ProviderAPIError(UpstreamUnavailable):
    """Upstream answered with a non-success status.

    Stores the HTTP status code and a snippet of the response body.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Provider API error {status_code}: {message}")


class MalformedResponseError(UpstreamUnavailable):
    """Upstream body was not JSON or not shaped like {"numbers": [int, ...]}."""


class ProviderNotConnectedError(ProviderError):
    """fetch() called before connect()."""
