# sales_tracker/core/buckets.py
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

PRICE_BOUNDARIES: Tuple[int, ...] = (0, 100, 200, 300, 400, 500, 600, 700, 800, 900)
OPEN_ENDED_LABEL = "above"


def bucket_label(index: int, boundaries: Sequence[int] = PRICE_BOUNDARIES) -> str:
    lower = boundaries[index]
    if index + 1 < len(boundaries):
        return f"{lower}-{boundaries[index + 1]}"
    return f"{lower}-{OPEN_ENDED_LABEL}"


def bucket_index(price: float, boundaries: Sequence[int] = PRICE_BOUNDARIES) -> int:
    """Return the index of the bucket holding *price*.

    Buckets are half-open (``lower <= price < upper``) and the last one has no
    upper bound. Prices below the first boundary land in the first bucket.
    """
    for index in range(len(boundaries) - 1, 0, -1):
        if price >= boundaries[index]:
            return index
    return 0


def bucket_prices(
    rows: Iterable[Tuple[float, int]],
    boundaries: Sequence[int] = PRICE_BOUNDARIES,
) -> List[Dict[str, object]]:
    """Sum ``(price, count)`` pairs into the fixed price ranges.

    Every bucket is emitted, in boundary order, even when its count is zero.
    """
    counts = [0] * len(boundaries)
    for price, count in rows:
        if price is None:
            continue
        counts[bucket_index(float(price), boundaries)] += int(count)
    return [
        {"range": bucket_label(index, boundaries), "count": count}
        for index, count in enumerate(counts)
    ]
