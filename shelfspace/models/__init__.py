from .product import Product
from .constraint import Allow, Deny, ShelfConstraint, is_category_allowed
from .shelf import Gondola, Shelf, Slot
from .solver_config import SolverConfig

__all__ = ['Product', 'Allow', 'Deny', 'ShelfConstraint', 'is_category_allowed',
           'Gondola', 'Shelf', 'Slot', 'SolverConfig']
