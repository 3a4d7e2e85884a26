"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from nestegg.analysis.sim_models import SimulationParameters


@pytest.fixture(autouse=True)
def quiet_settings(monkeypatch, tmp_path):
    """Keep log files and console noise out of the working tree."""
    monkeypatch.setenv("NE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("NE_LOG_LEVEL", "WARNING")


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def default_params():
    """The web form's default scenario, with fewer paths for speed."""
    return SimulationParameters(
        simulation_count=200,
        years=20,
        initial_investment=100_000.0,
        monthly_contribution=700.0,
        inflation_rate=0.02,
        annual_return=0.075,
        volatility=0.15,
    )


@pytest.fixture
def deterministic_params():
    """Zero volatility: every path follows the same curve."""
    return SimulationParameters(
        simulation_count=5,
        years=3,
        initial_investment=1000.0,
        monthly_contribution=0.0,
        inflation_rate=0.0,
        annual_return=0.12,
        volatility=0.0,
    )


class ScriptedUniform:
    """Uniform source replaying pre-set responses, one per ``random`` call."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def random(self, size=None):
        self.calls.append(size)
        value = self._responses.pop(0)
        if size is None:
            return value
        return np.array(value, dtype=float).reshape(size)


@pytest.fixture
def scripted_uniform():
    return ScriptedUniform
