"""Provider abstraction layer.

Re-exports all public types, protocols, and errors for convenient imports:
    from avgcalc.providers import NumberKind, NumberProvider, UpstreamUnavailable
"""

from avgcalc.providers.errors import (
    MalformedResponseError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderError,
    ProviderNotConnectedError,
    ProviderTimeoutError,
    UpstreamUnavailable,
)
from avgcalc.providers.number_provider import NumberProvider
from avgcalc.providers.types import FetchStrategy, NumberKind

__all__ = [
    "FetchStrategy",
    "MalformedResponseError",
    "NumberKind",
    "NumberProvider",
    "ProviderAPIError",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderNotConnectedError",
    "ProviderTimeoutError",
    "UpstreamUnavailable",
]
