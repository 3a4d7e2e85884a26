"""Monthly portfolio paths with inflation-indexed contributions.

Each path starts at the initial investment. Every month the portfolio grows
by a normally distributed return and then receives the contribution, which
is indexed to inflation once per year.
"""

import logging

import numpy as np

from . import MONTHS_PER_YEAR, SimulationParameters, UniformSource
from .normal import BoxMullerNormal

logger = logging.getLogger(__name__)


def monthly_moments(annual_return: float, volatility: float) -> tuple[float, float]:
    """Convert annualised return/volatility to a monthly mean and std dev."""
    mu = float(np.power(1.0 + annual_return, 1.0 / MONTHS_PER_YEAR)) - 1.0
    sigma = volatility / np.sqrt(MONTHS_PER_YEAR)
    return mu, float(sigma)


def simulate_paths(params: SimulationParameters, rng: UniformSource) -> np.ndarray:
    """Generate the path matrix for ``params``.

    Args:
        params: Simulation inputs.
        rng: Uniform source feeding the Box-Muller generator.

    Returns:
        Array of shape ``(simulation_count, months)``; row ``i`` holds path
        ``i``'s end-of-month values. Non-positive counts or horizons give an
        empty matrix.
    """
    num_paths = max(int(params.simulation_count), 0)
    months = params.months
    paths = np.empty((num_paths, months), dtype=float)

    if num_paths == 0 or months == 0:
        logger.warning(
            "Degenerate simulation: %d paths x %d months", num_paths, months
        )
        return paths

    mu, sigma = monthly_moments(params.annual_return, params.volatility)
    logger.debug("Monthly moments: mu=%.6f sigma=%.6f", mu, sigma)

    # Row-major: path 0 consumes all of its months before path 1 starts.
    z = BoxMullerNormal(rng).draw_many((num_paths, months))

    value = np.full(num_paths, float(params.initial_investment))
    contribution = float(params.monthly_contribution)

    for m in range(1, months + 1):
        if m % MONTHS_PER_YEAR == 1 and m > 1:
            contribution *= 1.0 + params.inflation_rate

        r = mu + sigma * z[:, m - 1]
        value = value * (1.0 + r) + contribution
        paths[:, m - 1] = value

    return paths
