"""Reduce a path matrix into percentile bands and outcome summaries.

All functions are pure: they take the ``(paths, months)`` matrix (or values
derived from it) and return plain lists/dicts ready for JSON or charting.
"""

import logging
import math
from typing import Literal

import numpy as np

from nestegg.analysis.sim_models import (
    MONTHS_PER_YEAR,
    AnnualReturnRecord,
    FinalValueStats,
    HistogramBin,
    MonthlySummary,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BAND_LEVELS = (0.10, 0.50, 0.90)
DEFAULT_HISTOGRAM_BINS = 20

AnnualAnchor = Literal["prior_close", "year_start"]
ANNUAL_ANCHORS: tuple[str, ...] = ("prior_close", "year_start")


# ---------------------------------------------------------------------------
# Percentile primitive
# ---------------------------------------------------------------------------


def percentile(sorted_values, p: float):
    """Linearly interpolated percentile of an ascending sequence.

    ``idx = (n - 1) * p``; the result is
    ``arr[lo] + (arr[hi] - arr[lo]) * (idx - lo)`` with ``lo``/``hi`` the
    floor/ceiling of ``idx``.

    A 2-D input is treated column-wise (each column already sorted) and an
    array with one value per column is returned. An empty sequence gives NaN.
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"percentile fraction must be within [0, 1], got {p}")

    arr = np.asarray(sorted_values, dtype=float)
    n = arr.shape[0]
    if n == 0:
        return float("nan") if arr.ndim == 1 else np.full(arr.shape[1:], np.nan)

    idx = (n - 1) * p
    lo = math.floor(idx)
    hi = math.ceil(idx)
    result = arr[lo] + (arr[hi] - arr[lo]) * (idx - lo)
    return float(result) if arr.ndim == 1 else result


# ---------------------------------------------------------------------------
# Monthly bands
# ---------------------------------------------------------------------------


def monthly_percentiles(paths: np.ndarray) -> list[MonthlySummary]:
    """p10/p50/p90 of every month's cross-path distribution, in month order."""
    paths = np.asarray(paths, dtype=float)
    if paths.ndim != 2 or paths.shape[0] == 0:
        return []

    # Sort along the path axis: each month is ordered independently.
    by_month = np.sort(paths, axis=0)
    p10, p50, p90 = (percentile(by_month, p) for p in BAND_LEVELS)

    return [
        MonthlySummary(
            month=m + 1,
            p10=float(p10[m]),
            p50=float(p50[m]),
            p90=float(p90[m]),
        )
        for m in range(by_month.shape[1])
    ]


# ---------------------------------------------------------------------------
# Annual returns
# ---------------------------------------------------------------------------


def annual_returns(
    monthly: list[MonthlySummary],
    years: int,
    initial_investment: float,
    anchor: AnnualAnchor = "prior_close",
) -> list[AnnualReturnRecord]:
    """Percentage change of the median trajectory over each year.

    Args:
        monthly: Output of :func:`monthly_percentiles`.
        years: Horizon in years.
        initial_investment: Fallback starting median.
        anchor: ``"prior_close"`` measures year ``y`` from the median at the
            end of year ``y - 1`` (the initial investment for year 1);
            ``"year_start"`` measures it from the median of the first month of
            year ``y``.

    Returns:
        One record per year, ``return_pct`` in percent.
    """
    if anchor not in ANNUAL_ANCHORS:
        raise ValueError(f"unknown annual return anchor: {anchor!r}")

    def median_at(index: int) -> float | None:
        if 0 <= index < len(monthly):
            return monthly[index]["p50"]
        return None

    records: list[AnnualReturnRecord] = []
    for y in range(1, max(int(years), 0) + 1):
        if anchor == "prior_close":
            start_index = (y - 1) * MONTHS_PER_YEAR - 1
        else:
            start_index = (y - 1) * MONTHS_PER_YEAR
        end_index = y * MONTHS_PER_YEAR - 1

        start_med = median_at(start_index) or initial_investment
        end_med = median_at(end_index)
        if end_med is None:
            end_med = start_med

        if start_med == 0:
            return_pct = 0.0
        else:
            return_pct = (end_med / start_med - 1.0) * 100.0
        records.append(AnnualReturnRecord(year=y, return_pct=float(return_pct)))

    return records


# ---------------------------------------------------------------------------
# Final-value distribution
# ---------------------------------------------------------------------------


def final_values(paths: np.ndarray, initial_investment: float) -> np.ndarray:
    """Last value of every path (``initial_investment`` for an empty path)."""
    paths = np.asarray(paths, dtype=float)
    if paths.ndim != 2 or paths.shape[0] == 0:
        return np.empty(0, dtype=float)
    if paths.shape[1] == 0:
        return np.full(paths.shape[0], float(initial_investment))
    return paths[:, -1].copy()


def final_value_stats(values: np.ndarray, initial_investment: float) -> FinalValueStats:
    """Mean and p10/p50/p90 of the final values."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        logger.debug("No final values; falling back to initial investment")
        fallback = float(initial_investment)
        return FinalValueStats(count=0, mean=fallback, p10=fallback, p50=fallback, p90=fallback)

    ordered = np.sort(values)
    return FinalValueStats(
        count=int(values.size),
        mean=float(np.mean(values)),
        p10=percentile(ordered, 0.10),
        p50=percentile(ordered, 0.50),
        p90=percentile(ordered, 0.90),
    )


def _round_half_up(x: float) -> int:
    """Round to the nearest integer, ties toward +inf."""
    return math.floor(x + 0.5)


def histogram(values: np.ndarray, bins: int = DEFAULT_HISTOGRAM_BINS) -> list[HistogramBin]:
    """Equal-width histogram over ``[min(values), max(values)]``.

    The maximum falls in the last bin. When every value is equal the width is
    zero and all values are counted in the first bin.
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0 or bins < 1:
        return []

    lo = float(np.min(values))
    hi = float(np.max(values))
    width = (hi - lo) / bins

    if width > 0:
        idx = np.floor((values - lo) / width).astype(int)
        idx = np.minimum(idx, bins - 1)
    else:
        idx = np.zeros(values.size, dtype=int)
    counts = np.bincount(idx, minlength=bins)

    return [
        HistogramBin(
            range_label=f"{_round_half_up(lo + i * width)}-{_round_half_up(lo + (i + 1) * width)}",
            count=int(counts[i]),
        )
        for i in range(bins)
    ]
