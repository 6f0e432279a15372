"""Service layer: request orchestration and averaging."""

from avgcalc.service.aggregator import (
    AggregateResponse,
    AggregatorService,
    InvalidKindError,
    compute_average,
)

__all__ = [
    "AggregateResponse",
    "AggregatorService",
    "InvalidKindError",
    "compute_average",
]
