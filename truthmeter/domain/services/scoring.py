"""Percentage arithmetic for stance breakdowns.

All rounding is done on integer tenths of a percent, so a breakdown that
sums to 1000 tenths sums to exactly 100.0 at one-decimal precision.
"""

from typing import NamedTuple

TOTAL_TENTHS = 1000


class PercentageBreakdown(NamedTuple):
    """Agreement, disagreement and neutral shares in percent."""

    agreement: float
    disagreement: float
    neutral: float


def _rounded_tenths(count: int, total: int) -> int:
    """``100 * count / total`` in tenths of a percent, rounded half up."""
    quotient, remainder = divmod(count * TOTAL_TENTHS, total)
    return quotient + (1 if 2 * remainder >= total else 0)


def _to_tenths(value: float) -> int:
    return int(round(value * 10))


def normalize_percentages(supporting: int, contradicting: int, neutral: int) -> PercentageBreakdown:
    """Turn stance counts into one-decimal percentages summing to 100.0.

    Each share is rounded on its own. Any rounding drift is added to the
    currently largest share; ties go to agreement, then disagreement, then
    neutral.

    Raises:
        ValueError: If a count is negative or all counts are zero
    """
    counts = (supporting, contradicting, neutral)
    if any(count < 0 for count in counts):
        raise ValueError(f"Counts must not be negative: {counts}")
    total = sum(counts)
    if total == 0:
        raise ValueError("Cannot compute percentages from zero sources")

    tenths = [_rounded_tenths(count, total) for count in counts]
    residual = TOTAL_TENTHS - sum(tenths)
    if residual:
        # max() returns the first maximal index, which gives the tie order
        largest = max(range(len(tenths)), key=lambda index: tenths[index])
        tenths[largest] += residual

    return PercentageBreakdown(*(value / 10 for value in tenths))


def percentages_sum_to_100(agreement: float, disagreement: float, neutral: float) -> bool:
    """Check the breakdown invariant at one-decimal precision."""
    return _to_tenths(agreement) + _to_tenths(disagreement) + _to_tenths(neutral) == TOTAL_TENTHS
