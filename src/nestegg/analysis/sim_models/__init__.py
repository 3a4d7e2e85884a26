"""Monte Carlo path models package.

Provides the building blocks of a portfolio projection:
- normal: Box-Muller standard normal deviates from a uniform source
- paths: monthly compounding paths with inflation-indexed contributions
"""

from dataclasses import dataclass
from typing import Protocol, TypedDict

MONTHS_PER_YEAR = 12


class UniformSource(Protocol):
    """Anything that draws uniforms in [0, 1) like ``np.random.Generator``."""

    def random(self, size=None): ...


@dataclass(frozen=True)
class SimulationParameters:
    """Inputs of one simulation run."""

    simulation_count: int
    years: int
    initial_investment: float
    monthly_contribution: float = 0.0
    inflation_rate: float = 0.0
    annual_return: float = 0.0
    volatility: float = 0.0

    @property
    def months(self) -> int:
        return max(int(self.years), 0) * MONTHS_PER_YEAR


class MonthlySummary(TypedDict):
    month: int
    p10: float
    p50: float
    p90: float


class AnnualReturnRecord(TypedDict):
    year: int
    return_pct: float


class FinalValueStats(TypedDict):
    count: int
    mean: float
    p10: float
    p50: float
    p90: float


class HistogramBin(TypedDict):
    range_label: str
    count: int


__all__ = [
    "MONTHS_PER_YEAR",
    "UniformSource",
    "SimulationParameters",
    "MonthlySummary",
    "AnnualReturnRecord",
    "FinalValueStats",
    "HistogramBin",
]
