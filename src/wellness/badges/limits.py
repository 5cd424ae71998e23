"""Limit clamping for list endpoints."""

from __future__ import annotations

import math
from typing import overload


@overload
def clamp_limit(limit: float | None, default: int, minimum: int, maximum: int) -> int: ...
@overload
def clamp_limit(limit: float | None, default: None, minimum: int, maximum: int) -> int | None: ...


def clamp_limit(limit: float | None, default: int | None, minimum: int, maximum: int) -> int | None:
    """Bound a caller-supplied limit to [minimum, maximum].

    ``None`` and non-finite values (NaN, infinities) mean "not passed" and
    yield ``default``, which may itself be ``None`` for "no limit".
    """
    if limit is None or not math.isfinite(limit):
        return default
    if limit < minimum:
        return minimum
    if limit > maximum:
        return maximum
    return int(limit)
