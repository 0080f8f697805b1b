"""Shelf-space assignment optimizer"""
from shelfspace.models import Allow, Deny, Gondola, Product, Shelf, SolverConfig
from shelfspace.optimization import Assignment, SolveResult, SolveStatus, optimize_shelf_space

__version__ = "0.1.0"

__all__ = ['Allow', 'Deny', 'Gondola', 'Product', 'Shelf', 'SolverConfig',
           'Assignment', 'SolveResult', 'SolveStatus', 'optimize_shelf_space']
