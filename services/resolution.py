from enum import Enum
from typing import Any, Optional


class Resolution(str, Enum):
    ONE_K = "1K"
    TWO_K = "2K"
    FOUR_K = "4K"


_BY_LEADING_DIGIT = {
    "1": Resolution.ONE_K,
    "2": Resolution.TWO_K,
    "4": Resolution.FOUR_K,
}


def normalize_resolution(hint: Optional[Any]) -> Resolution:
    """Map a free-form hint ("2k", " 4K ", "1x", None, ...) onto 1K/2K/4K. Defaults to 1K."""
    upper = str(hint).upper().strip() if hint is not None else ""
    for tier in Resolution:
        if upper == tier.value:
            return tier
    return _BY_LEADING_DIGIT.get(upper[:1], Resolution.ONE_K)
