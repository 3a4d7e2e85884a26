"""Pydantic request/response schemas for the nestegg API."""

from datetime import datetime, timezone
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# --- Base schemas ---


class Meta(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ApiResponse(BaseModel, Generic[T]):
    data: T
    meta: Meta = Field(default_factory=Meta)


class HealthResponse(BaseModel):
    status: str
    version: str


# --- Simulation schemas ---


class SimulationRequest(BaseModel):
    """Simulation inputs; omitted fields fall back to the server defaults."""

    simulation_count: int | None = Field(None, ge=1, description="Number of independent paths")
    years: int | None = Field(None, ge=1, description="Horizon in years")
    initial_investment: float | None = Field(None, ge=0, description="Starting portfolio value")
    monthly_contribution: float | None = Field(None, description="Deposit added each month")
    inflation_rate: float | None = Field(None, description="Annual growth of the contribution")
    annual_return: float | None = Field(None, gt=-1, description="Expected annualised return")
    volatility: float | None = Field(None, ge=0, description="Annualised standard deviation")
    seed: int | None = Field(None, ge=0, description="Seed for a reproducible run")
    anchor: Literal["prior_close", "year_start"] | None = Field(
        None, description="Start point of each annual return"
    )
    include_paths: bool = Field(False, description="Return the raw path matrix as well")


class SimulationParametersOut(BaseModel):
    simulation_count: int
    years: int
    initial_investment: float
    monthly_contribution: float
    inflation_rate: float
    annual_return: float
    volatility: float


class MonthlySummaryOut(BaseModel):
    month: int
    p10: float
    p50: float
    p90: float


class AnnualReturnOut(BaseModel):
    year: int
    return_pct: float = Field(description="Median return over the year (%)")


class FinalValueStatsOut(BaseModel):
    count: int
    mean: float
    p10: float
    p50: float
    p90: float


class HistogramBinOut(BaseModel):
    range_label: str
    count: int


class SimulationSummary(BaseModel):
    parameters: SimulationParametersOut
    monthly: list[MonthlySummaryOut]
    annual_returns: list[AnnualReturnOut]
    final_stats: FinalValueStatsOut
    histogram: list[HistogramBinOut]
    paths: list[list[float]] | None = None
