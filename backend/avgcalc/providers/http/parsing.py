"""Response body validation for the upstream number generators."""

from __future__ import annotations

from typing import Any

from avgcalc.providers.errors import MalformedResponseError


def parse_numbers(payload: Any) -> list[int]:
    """Extract the ``numbers`` list from a decoded upstream body.

    A body without the key means "no numbers". Anything else that is not
    a list of plain integers is malformed; booleans are rejected even
    though they subclass int.

    Raises:
        MalformedResponseError: If the body is not shaped like
            ``{"numbers": [int, ...]}``.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"expected a JSON object, got {type(payload).__name__}"
        )

    numbers = payload.get("numbers")
    if numbers is None:
        return []
    if not isinstance(numbers, list):
        raise MalformedResponseError(
            f"'numbers' must be a list, got {type(numbers).__name__}"
        )

    for value in numbers:
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedResponseError(f"non-integer value in numbers: {value!r}")
    return list(numbers)
