"""Monte Carlo simulation orchestrator.

Generates the path matrix and reduces it into the summaries the CLI and the
API hand out: monthly percentile bands, annual median returns, final-value
statistics and a final-value histogram.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

import numpy as np

from nestegg.analysis.aggregate import (
    DEFAULT_HISTOGRAM_BINS,
    AnnualAnchor,
    annual_returns,
    final_value_stats,
    final_values,
    histogram,
    monthly_percentiles,
)
from nestegg.analysis.export import paths_to_csv
from nestegg.analysis.sim_models import (
    AnnualReturnRecord,
    FinalValueStats,
    HistogramBin,
    MonthlySummary,
    SimulationParameters,
    UniformSource,
)
from nestegg.analysis.sim_models.paths import simulate_paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Everything one run produces. ``paths`` is a read-only array."""

    parameters: SimulationParameters
    monthly: tuple[MonthlySummary, ...]
    annual_returns: tuple[AnnualReturnRecord, ...]
    final_stats: FinalValueStats
    histogram: tuple[HistogramBin, ...]
    paths: np.ndarray

    @property
    def final_values(self) -> np.ndarray:
        return final_values(self.paths, self.parameters.initial_investment)

    def to_csv(self) -> str:
        """Raw path export (see :mod:`nestegg.analysis.export`)."""
        return paths_to_csv(self.paths)

    def to_dict(self, include_paths: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "parameters": {
                "simulation_count": self.parameters.simulation_count,
                "years": self.parameters.years,
                "initial_investment": self.parameters.initial_investment,
                "monthly_contribution": self.parameters.monthly_contribution,
                "inflation_rate": self.parameters.inflation_rate,
                "annual_return": self.parameters.annual_return,
                "volatility": self.parameters.volatility,
            },
            "monthly": [dict(row) for row in self.monthly],
            "annual_returns": [dict(row) for row in self.annual_returns],
            "final_stats": dict(self.final_stats),
            "histogram": [dict(row) for row in self.histogram],
        }
        if include_paths:
            data["paths"] = self.paths.tolist()
        return data


def run_monte_carlo(
    params: SimulationParameters,
    rng: UniformSource | None = None,
    seed: int | None = None,
    histogram_bins: int = DEFAULT_HISTOGRAM_BINS,
    anchor: AnnualAnchor = "prior_close",
) -> SimulationResult:
    """Run a full simulation and aggregate it.

    Args:
        params: Simulation inputs.
        rng: Uniform source; takes precedence over ``seed``.
        seed: Seed for a fresh ``np.random.default_rng`` when ``rng`` is None.
            Without either, the run draws from OS entropy.
        histogram_bins: Number of equal-width bins for final values.
        anchor: Start point of each annual return, see
            :func:`nestegg.analysis.aggregate.annual_returns`.

    Returns:
        SimulationResult with every summary and the raw paths.
    """
    if rng is None:
        rng = np.random.default_rng(seed=seed)

    if params.simulation_count < 1 or params.years < 1:
        logger.warning(
            "Non-positive simulation size (count=%s, years=%s); output will be empty",
            params.simulation_count,
            params.years,
        )

    started = time.perf_counter()
    paths = simulate_paths(params, rng)
    paths.setflags(write=False)

    monthly = monthly_percentiles(paths)
    finals = final_values(paths, params.initial_investment)

    result = SimulationResult(
        parameters=params,
        monthly=tuple(monthly),
        annual_returns=tuple(
            annual_returns(monthly, params.years, params.initial_investment, anchor=anchor)
        ),
        final_stats=final_value_stats(finals, params.initial_investment),
        histogram=tuple(histogram(finals, bins=histogram_bins)),
        paths=paths,
    )

    logger.info(
        "Simulated %d paths x %d months in %.3fs (median final %.2f)",
        paths.shape[0],
        paths.shape[1],
        time.perf_counter() - started,
        result.final_stats["p50"],
    )
    return result
