from .result import Assignment, SolveResult, SolveStatus
from .base_optimizer import BaseOptimizer
from .shelf_optimizer import ShelfSpaceOptimizer, optimize_shelf_space

__all__ = ['Assignment', 'SolveResult', 'SolveStatus', 'BaseOptimizer',
           'ShelfSpaceOptimizer', 'optimize_shelf_space']
