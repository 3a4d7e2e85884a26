"""Simulation API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from nestegg.analysis.sim_models import SimulationParameters
from nestegg.analysis.simulation import SimulationResult, run_monte_carlo
from nestegg.config import Settings
from nestegg.web.dependencies import get_settings
from nestegg.web.schemas import ApiResponse, SimulationRequest, SimulationSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulation", tags=["simulation"])


def _resolve_parameters(req: SimulationRequest, settings: Settings) -> SimulationParameters:
    """Fill omitted request fields from settings and enforce size limits."""
    defaults = settings.default_parameters()
    params = SimulationParameters(
        simulation_count=req.simulation_count or defaults.simulation_count,
        years=req.years or defaults.years,
        initial_investment=(
            defaults.initial_investment if req.initial_investment is None else req.initial_investment
        ),
        monthly_contribution=(
            defaults.monthly_contribution if req.monthly_contribution is None else req.monthly_contribution
        ),
        inflation_rate=defaults.inflation_rate if req.inflation_rate is None else req.inflation_rate,
        annual_return=defaults.annual_return if req.annual_return is None else req.annual_return,
        volatility=defaults.volatility if req.volatility is None else req.volatility,
    )

    if params.simulation_count > settings.max_simulations:
        raise HTTPException(
            status_code=422,
            detail=f"simulation_count must be <= {settings.max_simulations}",
        )
    if params.years > settings.max_years:
        raise HTTPException(
            status_code=422,
            detail=f"years must be <= {settings.max_years}",
        )
    if params.simulation_count * params.months > settings.max_cells:
        raise HTTPException(
            status_code=422,
            detail=(
                f"simulation_count x months must be <= {settings.max_cells} "
                f"(got {params.simulation_count * params.months})"
            ),
        )
    return params


def _run(req: SimulationRequest, settings: Settings) -> SimulationResult:
    params = _resolve_parameters(req, settings)
    logger.info(
        "Simulation request: %d paths, %d years, seed=%s",
        params.simulation_count,
        params.years,
        req.seed,
    )
    return run_monte_carlo(
        params,
        seed=req.seed,
        histogram_bins=settings.histogram_bins,
        anchor=req.anchor or settings.annual_anchor,
    )


@router.post("/run", response_model=ApiResponse[SimulationSummary])
def run_simulation(
    req: SimulationRequest,
    settings: Settings = Depends(get_settings),
):
    """Run a Monte Carlo simulation and return its summaries."""
    result = _run(req, settings)
    summary = SimulationSummary(**result.to_dict(include_paths=req.include_paths))
    return ApiResponse(data=summary)


@router.post("/export")
def export_simulation(
    req: SimulationRequest,
    settings: Settings = Depends(get_settings),
):
    """Run a Monte Carlo simulation and download the raw paths as CSV."""
    result = _run(req, settings)
    return Response(
        content=result.to_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{settings.export_filename}"'},
    )
