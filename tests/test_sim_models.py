"""Unit tests for the normal generator and the path simulator."""

import math
from dataclasses import replace

import numpy as np
import pytest

from nestegg.analysis.sim_models import SimulationParameters
from nestegg.analysis.sim_models.normal import BoxMullerNormal
from nestegg.analysis.sim_models.paths import monthly_moments, simulate_paths


# ---------------------------------------------------------------------------
# Box-Muller Tests
# ---------------------------------------------------------------------------

class TestBoxMuller:
    def test_transform_formula(self, scripted_uniform):
        source = scripted_uniform([math.exp(-2.0), 0.5])
        z = BoxMullerNormal(source).draw()
        # sqrt(-2 * -2) * cos(pi) = -2
        assert z == pytest.approx(-2.0)

    def test_zero_uniform_is_redrawn(self, scripted_uniform):
        source = scripted_uniform([0.0, math.exp(-2.0), 0.0, 0.5])
        z = BoxMullerNormal(source).draw()
        assert z == pytest.approx(-2.0)
        assert len(source.calls) == 4

    def test_draw_many_redraws_zeros(self, scripted_uniform):
        e2 = math.exp(-2.0)
        source = scripted_uniform([
            [[0.0, 0.5], [e2, 0.5]],
            [e2],
        ])
        z = BoxMullerNormal(source).draw_many(2)
        np.testing.assert_allclose(z, [-2.0, -2.0])

    def test_batch_matches_sequential_draws(self):
        batch = BoxMullerNormal(np.random.default_rng(7)).draw_many(50)
        single = BoxMullerNormal(np.random.default_rng(7))
        sequential = [single.draw() for _ in range(50)]
        np.testing.assert_allclose(batch, sequential, rtol=1e-12, atol=1e-12)

    def test_draw_many_shape(self, rng):
        z = BoxMullerNormal(rng).draw_many((3, 4))
        assert z.shape == (3, 4)
        assert np.all(np.isfinite(z))

    def test_standard_normal_moments(self, rng):
        z = BoxMullerNormal(rng).draw_many(200_000)
        assert abs(float(np.mean(z))) < 0.01
        assert float(np.std(z)) == pytest.approx(1.0, abs=0.01)


# ---------------------------------------------------------------------------
# Path Simulator Tests
# ---------------------------------------------------------------------------

class TestMonthlyMoments:
    def test_mean_compounds_to_annual(self):
        mu, _ = monthly_moments(0.12, 0.0)
        assert (1 + mu) ** 12 == pytest.approx(1.12)

    def test_sigma_scaling(self):
        _, sigma = monthly_moments(0.07, 0.15)
        assert sigma == pytest.approx(0.15 / math.sqrt(12))


class TestSimulatePaths:
    def test_shape(self, default_params, rng):
        paths = simulate_paths(default_params, rng)
        assert paths.shape == (200, 240)
        assert np.all(np.isfinite(paths))

    def test_zero_volatility_paths_identical(self, deterministic_params, rng):
        paths = simulate_paths(deterministic_params, rng)
        for row in paths[1:]:
            np.testing.assert_array_equal(row, paths[0])

    def test_one_year_at_twelve_percent(self, rng):
        params = SimulationParameters(
            simulation_count=1, years=1, initial_investment=1000.0,
            monthly_contribution=0.0, inflation_rate=0.0,
            annual_return=0.12, volatility=0.0,
        )
        path = simulate_paths(params, rng)[0]
        assert path[11] == pytest.approx(1120.0, rel=1e-9)
        assert np.all(np.diff(path) > 0)

    def test_contribution_inflates_once_per_year(self, rng):
        params = SimulationParameters(
            simulation_count=1, years=2, initial_investment=0.0,
            monthly_contribution=100.0, inflation_rate=0.10,
            annual_return=0.0, volatility=0.0,
        )
        path = simulate_paths(params, rng)[0]
        np.testing.assert_allclose(path[:12], np.arange(1, 13) * 100.0)
        assert path[12] == pytest.approx(1200.0 + 110.0)
        assert path[23] == pytest.approx(1200.0 + 12 * 110.0)

    def test_deposit_added_after_growth(self, rng):
        params = SimulationParameters(
            simulation_count=1, years=1, initial_investment=1000.0,
            monthly_contribution=100.0, inflation_rate=0.0,
            annual_return=0.12, volatility=0.0,
        )
        mu, _ = monthly_moments(0.12, 0.0)
        path = simulate_paths(params, rng)[0]
        assert path[0] == pytest.approx(1000.0 * (1 + mu) + 100.0)
        assert path[1] == pytest.approx(path[0] * (1 + mu) + 100.0)

    def test_reproducibility(self, default_params):
        p1 = simulate_paths(default_params, np.random.default_rng(999))
        p2 = simulate_paths(default_params, np.random.default_rng(999))
        np.testing.assert_array_equal(p1, p2)

    def test_different_seeds_differ(self, default_params):
        p1 = simulate_paths(default_params, np.random.default_rng(1))
        p2 = simulate_paths(default_params, np.random.default_rng(2))
        assert not np.array_equal(p1, p2)

    def test_paths_draw_in_generation_order(self, default_params):
        """The first path of a larger run is the same as a one-path run."""
        one = replace(default_params, simulation_count=1)
        two = replace(default_params, simulation_count=2)
        single = simulate_paths(one, np.random.default_rng(5))
        pair = simulate_paths(two, np.random.default_rng(5))
        np.testing.assert_allclose(pair[0], single[0], rtol=1e-12)

    @pytest.mark.parametrize("count, years, shape", [
        (0, 5, (0, 60)),
        (3, 0, (3, 0)),
        (-2, 1, (0, 12)),
        (2, -1, (2, 0)),
    ])
    def test_degenerate_sizes_do_not_raise(self, rng, count, years, shape):
        params = SimulationParameters(
            simulation_count=count, years=years, initial_investment=500.0,
        )
        assert simulate_paths(params, rng).shape == shape
