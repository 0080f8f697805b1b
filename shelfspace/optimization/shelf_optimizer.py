from typing import Optional, Sequence

from ortools.linear_solver import pywraplp

from shelfspace.data_processing.data_validator import DataValidator
from shelfspace.models.product import Product
from shelfspace.models.shelf import Gondola
from shelfspace.models.solver_config import SolverConfig
from shelfspace.optimization.assignment_extractor import extract_assignments
from shelfspace.optimization.base_optimizer import BaseOptimizer, SolveRun
from shelfspace.optimization.extractors import extract_category_constraints, extract_positions
from shelfspace.optimization.facings import estimate_all
from shelfspace.optimization.model_builder import ModelBuilder
from shelfspace.optimization.result import SolveResult, SolveStatus
from shelfspace.optimization.solver_adapter import SolverAdapter, status_name
from shelfspace.utils.error_handler import (
    EmptyLayoutError,
    EmptyModelError,
    SolverInternalError,
    SolverTimeoutError,
    describe_error,
)

INFEASIBLE_MESSAGE = (
    "No feasible assignment exists. Check that the gondolas have enough space and that "
    "category restrictions, diversity and minimum facings are not too strict."
)

# Time limit hit before the solver found any incumbent
NO_SOLUTION_STATUS = status_name(pywraplp.Solver.NOT_SOLVED)

class ShelfSpaceOptimizer(BaseOptimizer):
    """MILP assignment of products to shelf slots"""

    def _run_pipeline(self, products: Sequence[Product], gondolas: Sequence[Gondola],
                      run: SolveRun) -> SolveResult:
        config = run.config

        run.warnings.extend(DataValidator().check(products, gondolas))

        slots = extract_positions(gondolas)
        if not slots:
            raise EmptyLayoutError("The layout has no shelf slots to assign products to")

        constraints = extract_category_constraints(gondolas)
        desired = estimate_all(products, config)
        self.logger.info(
            f"Layout: {len(slots)} slots, {len(constraints)} constrained shelves; "
            f"{sum(desired.values())} desired facings across {len(products)} products"
        )

        try:
            model = ModelBuilder(config).build(products, slots, constraints, desired)
        except EmptyModelError as e:
            # Nothing can be placed, so the empty assignment is the optimum
            self.logger.warning(describe_error(e))
            return SolveResult(
                status=SolveStatus.OPTIMAL,
                unassigned_products=[p.product_id for p in products],
                message=f"{describe_error(e)}. No product can be placed on this layout.",
                warnings=list(run.warnings),
            )
        run.warnings.extend(model.warnings)

        run.attach_model(model)
        outcome = SolverAdapter(config).solve(model)

        if outcome.status == SolveStatus.INFEASIBLE:
            return SolveResult(
                status=SolveStatus.INFEASIBLE,
                unassigned_products=[p.product_id for p in products],
                message=INFEASIBLE_MESSAGE,
                warnings=list(run.warnings),
                model_stats=model.stats(),
            )
        if outcome.status == SolveStatus.ERROR:
            if outcome.native_status == NO_SOLUTION_STATUS:
                error = SolverTimeoutError(outcome.message)
            else:
                error = SolverInternalError(outcome.message)
            return SolveResult(
                status=SolveStatus.ERROR,
                unassigned_products=[p.product_id for p in products],
                message=describe_error(error),
                warnings=list(run.warnings),
                model_stats=model.stats(),
            )

        extraction = extract_assignments(model, outcome, products)
        if outcome.status == SolveStatus.OPTIMAL:
            message = "Optimal solution found"
        else:
            message = "Feasible solution found; the time limit was reached before optimality was proven"

        return SolveResult(
            status=outcome.status,
            assignments=extraction.assignments,
            objective_value=extraction.objective_value,
            unassigned_products=extraction.unassigned_products,
            message=message,
            warnings=list(run.warnings),
            model_stats=model.stats(),
        )

def optimize_shelf_space(products: Sequence[Product], gondolas: Sequence[Gondola],
                         config: Optional[SolverConfig] = None) -> SolveResult:
    """Solve one request: products and layout in, SolveResult out"""
    return ShelfSpaceOptimizer(config).optimize(products, gondolas)
