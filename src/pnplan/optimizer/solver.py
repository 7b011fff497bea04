"""Integer linear programming solver adapter."""

from __future__ import annotations

import time
from typing import Any, Optional

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

# scipy.optimize.milp status codes
STATUS_OPTIMAL = 0
STATUS_LIMIT_REACHED = 1
STATUS_INFEASIBLE = 2
STATUS_UNBOUNDED = 3


def solve_milp(
    costs: np.ndarray,
    constraint_matrix: np.ndarray,
    row_mins: np.ndarray,
    row_maxs: np.ndarray,
    integrality: Optional[np.ndarray] = None,
    time_limit: Optional[float] = None,
    presolve: bool = True,
) -> dict[str, Any]:
    """Solve a mixed-integer program using scipy.optimize.milp with HiGHS.

    Objective: min c'x
    Subject to:
        row_mins <= Ax <= row_maxs
        x >= 0
        x integral where integrality == 1

    Args:
        costs: Cost per unit of each variable, shape (n_vars,)
        constraint_matrix: Row coefficients, shape (n_rows, n_vars)
        row_mins: Lower bound per row (-inf if none), shape (n_rows,)
        row_maxs: Upper bound per row (inf if none), shape (n_rows,)
        integrality: 1 for integer variables, 0 for continuous. Defaults to all integer.
        time_limit: Solver time budget in seconds
        presolve: Whether HiGHS runs presolve

    Returns:
        Dict with solution info: success, status, infeasible, x, fun,
        message, elapsed_seconds
    """
    n_vars = len(costs)
    if integrality is None:
        integrality = np.ones(n_vars, dtype=int)

    constraints = None
    if constraint_matrix.shape[0] > 0:
        constraints = LinearConstraint(constraint_matrix, row_mins, row_maxs)

    options: dict[str, Any] = {"presolve": presolve}
    if time_limit is not None:
        options["time_limit"] = time_limit

    start_time = time.time()

    result = milp(
        c=costs,
        integrality=integrality,
        bounds=Bounds(np.zeros(n_vars), np.full(n_vars, np.inf)),
        constraints=constraints,
        options=options,
    )

    elapsed = time.time() - start_time
    success = result.status == STATUS_OPTIMAL and result.x is not None

    return {
        "success": success,
        "status": result.status,
        "infeasible": result.status == STATUS_INFEASIBLE,
        "x": result.x if success else None,
        "fun": float(result.fun) if success else None,
        "message": result.message,
        "elapsed_seconds": elapsed,
    }
