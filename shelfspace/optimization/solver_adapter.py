from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from ortools.linear_solver import pywraplp

from shelfspace.models.solver_config import SolverConfig
from shelfspace.optimization.result import SolveStatus
from shelfspace.utils.error_handler import SolverInternalError, SolverTimeoutError
from shelfspace.utils.logger import get_logger
from shelfspace.utils.monitor import monitor

STATUS_MAP = {
    pywraplp.Solver.OPTIMAL: SolveStatus.OPTIMAL,
    pywraplp.Solver.FEASIBLE: SolveStatus.FEASIBLE,
    pywraplp.Solver.INFEASIBLE: SolveStatus.INFEASIBLE,
}

STATUS_NAMES = {
    pywraplp.Solver.OPTIMAL: 'OPTIMAL',
    pywraplp.Solver.FEASIBLE: 'FEASIBLE',
    pywraplp.Solver.INFEASIBLE: 'INFEASIBLE',
    pywraplp.Solver.UNBOUNDED: 'UNBOUNDED',
    pywraplp.Solver.ABNORMAL: 'ABNORMAL',
    pywraplp.Solver.MODEL_INVALID: 'MODEL_INVALID',
    pywraplp.Solver.NOT_SOLVED: 'NOT_SOLVED',
}

def status_name(code: int) -> str:
    return STATUS_NAMES.get(code, f"UNKNOWN({code})")

def map_status(code: int) -> SolveStatus:
    """Collapse a native solver status into the four outcome values"""
    return STATUS_MAP.get(code, SolveStatus.ERROR)

def create_solver(backend: str) -> pywraplp.Solver:
    solver = pywraplp.Solver.CreateSolver(backend)
    if solver is None:
        raise SolverInternalError(f"MILP backend {backend!r} is not available in this OR-Tools build")
    return solver

@dataclass
class SolverOutcome:
    """Normalized solver answer"""
    status: SolveStatus
    native_status: str
    objective_value: float = 0.0
    values: Dict[Tuple[str, str, int], int] = field(default_factory=dict)
    wall_seconds: float = 0.0
    message: Optional[str] = None

class SolverAdapter:
    """Runs a built model through OR-Tools under the configured time limit"""

    def __init__(self, config: SolverConfig):
        self.config = config
        self.logger = get_logger()

    @monitor.time_it
    def solve(self, model) -> SolverOutcome:
        solver = model.solver
        solver.SetTimeLimit(int(self.config.max_execution_seconds * 1000))

        self.logger.info(
            f"Solving model ({model.num_variables} variables, {model.num_constraints} constraints) "
            f"with {self.config.solver_backend}, time limit {self.config.max_execution_seconds:.1f}s"
        )
        native = solver.Solve()
        status = map_status(native)
        wall_seconds = solver.wall_time() / 1000.0
        self.logger.info(f"Solver finished with status {status_name(native)} in {wall_seconds:.2f}s")

        if status in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE):
            values = {key: int(round(var.solution_value())) for key, var in model.x.items()}
            if not values:
                raise SolverInternalError("Solver reported a solution without any variable values")
            return SolverOutcome(
                status=status,
                native_status=status_name(native),
                objective_value=solver.Objective().Value(),
                values=values,
                wall_seconds=wall_seconds,
            )

        if status == SolveStatus.INFEASIBLE:
            message = None
        elif native == pywraplp.Solver.NOT_SOLVED:
            message = (
                f"Time limit of {self.config.max_execution_seconds:.1f}s expired before "
                f"any feasible solution was found"
            )
            self.logger.warning(message)
        else:
            message = f"Solver finished with status {status_name(native)}"
            self.logger.warning(message)

        return SolverOutcome(
            status=status,
            native_status=status_name(native),
            wall_seconds=wall_seconds,
            message=message,
        )

def run_with_timeout(func: Callable[..., Any], timeout: float, *args, **kwargs) -> Any:
    """Run ``func`` on a dedicated worker thread and wait at most ``timeout`` seconds.

    On expiry the worker is abandoned (not joined) and SolverTimeoutError is
    raised, so the caller never blocks past the budget.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='shelfspace-solver')
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeoutError as e:
        future.cancel()
        raise SolverTimeoutError(f"Solver did not return within {timeout:.1f}s") from e
    finally:
        executor.shutdown(wait=False)
