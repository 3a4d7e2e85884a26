from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from nestegg.analysis.sim_models import SimulationParameters


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NE_",
    )

    # Default simulation parameters
    simulation_count: int = 100
    years: int = 20
    initial_investment: float = 100_000.0
    monthly_contribution: float = 700.0
    inflation_rate: float = 0.02
    annual_return: float = 0.075
    volatility: float = 0.15

    # Aggregation
    histogram_bins: int = 20
    annual_anchor: Literal["prior_close", "year_start"] = "prior_close"

    # Export
    export_filename: str = "montecarlo.csv"

    # Request limits
    max_simulations: int = 20_000
    max_years: int = 100
    max_cells: int = 2_000_000  # simulation_count x months

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_dir: str = "logs"
    log_level: str = "INFO"

    def default_parameters(self) -> SimulationParameters:
        return SimulationParameters(
            simulation_count=self.simulation_count,
            years=self.years,
            initial_investment=self.initial_investment,
            monthly_contribution=self.monthly_contribution,
            inflation_rate=self.inflation_rate,
            annual_return=self.annual_return,
            volatility=self.volatility,
        )
