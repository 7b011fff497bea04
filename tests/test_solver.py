"""Tests for the MILP solver adapter."""

from __future__ import annotations

import numpy as np

from pnplan.optimizer.solver import STATUS_INFEASIBLE, STATUS_OPTIMAL, solve_milp


class TestSolveMILP:
    """Tests for integer linear programming solver."""

    def test_simple_optimization(self):
        """Minimize cost with a calorie range and whole units."""
        costs = np.array([45.5, 68.9])
        # Rows: kcal, volume
        matrix = np.array([
            [600.0, 1050.0],
            [1000.0, 1000.0],
        ])
        row_mins = np.array([1000.0, -np.inf])
        row_maxs = np.array([1500.0, 2000.0])

        result = solve_milp(costs, matrix, row_mins, row_maxs)

        assert result["success"], f"Optimization failed: {result['message']}"
        assert result["status"] == STATUS_OPTIMAL
        np.testing.assert_allclose(result["x"], [0, 1], atol=1e-6)
        assert abs(result["fun"] - 68.9) < 1e-6

    def test_integrality_forces_whole_units(self):
        """A continuous relaxation would use 1.25 units; integers need 2."""
        costs = np.array([10.0])
        matrix = np.array([[800.0]])
        row_mins = np.array([1000.0])
        row_maxs = np.array([np.inf])

        result = solve_milp(costs, matrix, row_mins, row_maxs)

        assert result["success"]
        assert abs(result["x"][0] - 2) < 1e-6

    def test_continuous_variables(self):
        costs = np.array([10.0])
        matrix = np.array([[800.0]])
        row_mins = np.array([1000.0])
        row_maxs = np.array([np.inf])

        result = solve_milp(
            costs, matrix, row_mins, row_maxs, integrality=np.array([0])
        )

        assert result["success"]
        assert abs(result["x"][0] - 1.25) < 1e-6

    def test_infeasible_constraints(self):
        """Too little volume to reach the calorie minimum."""
        costs = np.array([45.5])
        matrix = np.array([
            [600.0],
            [1000.0],
        ])
        row_mins = np.array([10000.0, -np.inf])
        row_maxs = np.array([11000.0, 1000.0])

        result = solve_milp(costs, matrix, row_mins, row_maxs)

        assert not result["success"]
        assert result["infeasible"]
        assert result["status"] == STATUS_INFEASIBLE
        assert result["x"] is None
        assert result["fun"] is None

    def test_no_rows(self):
        """Without constraints the cheapest plan is zero units."""
        result = solve_milp(
            np.array([1.0, 2.0]),
            np.zeros((0, 2)),
            np.array([]),
            np.array([]),
        )

        assert result["success"]
        np.testing.assert_allclose(result["x"], [0, 0], atol=1e-9)

    def test_reports_elapsed_time(self):
        result = solve_milp(
            np.array([1.0]),
            np.array([[1.0]]),
            np.array([1.0]),
            np.array([5.0]),
            time_limit=5.0,
        )

        assert result["elapsed_seconds"] >= 0
