from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import threading
import time

from shelfspace.models.product import Product
from shelfspace.models.shelf import Gondola
from shelfspace.models.solver_config import SolverConfig
from shelfspace.optimization.result import SolveResult, SolveStatus
from shelfspace.optimization.solver_adapter import run_with_timeout
from shelfspace.utils.error_handler import (
    ShelfSpaceError,
    SolverTimeoutError,
    describe_error,
    handle_errors,
)
from shelfspace.utils.logger import get_logger

class SolveRun:
    """State owned by a single optimizer invocation.

    The worker publishes the built model here so that the caller can
    interrupt a solve it has stopped waiting for.
    """

    def __init__(self, config: SolverConfig):
        self.config = config
        self.model = None
        self.warnings: List[str] = []
        self._cancelled = threading.Event()
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def attach_model(self, model):
        """Register the model about to be solved, refusing if the run was cancelled"""
        with self._lock:
            if self.cancelled:
                raise SolverTimeoutError("Run was cancelled before the solve started")
            self.model = model

    def interrupt(self) -> bool:
        """Cancel the run and stop a solve in progress"""
        with self._lock:
            self._cancelled.set()
            if self.model is None:
                return False
            return bool(self.model.solver.InterruptSolve())

class BaseOptimizer(ABC):
    """Base class for shelf-space optimization strategies.

    ``optimize`` is the public entry point: it runs the strategy's pipeline on
    a dedicated worker under the external timeout and always returns a
    SolveResult, converting every failure into an ERROR status.
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config if config is not None else SolverConfig()
        self.logger = get_logger()

    @abstractmethod
    def _run_pipeline(self, products: Sequence[Product], gondolas: Sequence[Gondola],
                      run: SolveRun) -> SolveResult:
        """Build, solve and decode one model"""
        pass

    @handle_errors(raise_on_error=True)
    def _guarded_pipeline(self, products: Sequence[Product], gondolas: Sequence[Gondola],
                          run: SolveRun) -> SolveResult:
        return self._run_pipeline(products, gondolas, run)

    def _error_result(self, products: Sequence[Product], message: str, run: SolveRun) -> SolveResult:
        self.logger.error(f"Optimization failed: {message}")
        return SolveResult(
            status=SolveStatus.ERROR,
            unassigned_products=[p.product_id for p in products],
            message=message,
            warnings=list(run.warnings),
        )

    def optimize(self, products: Sequence[Product], gondolas: Sequence[Gondola]) -> SolveResult:
        """Main entry point for one optimizer invocation"""
        start_time = time.time()
        run = SolveRun(self.config)
        products = list(products)
        gondolas = list(gondolas)
        self.logger.info(f"Starting optimization with {len(products)} products and {len(gondolas)} gondolas")

        try:
            run.config.validate()
            result = run_with_timeout(
                self._guarded_pipeline,
                run.config.external_timeout,
                products,
                gondolas,
                run,
            )
        except SolverTimeoutError as e:
            if run.interrupt():
                self.logger.warning("Interrupted the abandoned solve")
            result = self._error_result(products, describe_error(e), run)
        except ShelfSpaceError as e:
            result = self._error_result(products, describe_error(e), run)
        except Exception as e:
            wrapped = ShelfSpaceError(f"Unexpected error in optimize: {str(e)}")
            result = self._error_result(products, describe_error(wrapped), run)

        result.elapsed_seconds = time.time() - start_time
        self.logger.info(
            f"Optimization finished with status {result.status.value} in {result.elapsed_seconds:.2f}s"
        )
        return result
