from functools import wraps
from typing import Callable, Any

class ShelfSpaceError(Exception):
    """Base exception for the shelf-space optimizer"""
    pass

class ValidationError(ShelfSpaceError):
    """Input data validation error"""
    pass

class ConfigurationError(ShelfSpaceError):
    """Solver configuration error"""
    pass

class OptimizationError(ShelfSpaceError):
    """Optimization pipeline error"""
    pass

class EmptyLayoutError(OptimizationError):
    """No slots could be extracted from the layout"""
    pass

class EmptyModelError(OptimizationError):
    """No eligible product/slot decision variables exist"""
    pass

class SolverTimeoutError(OptimizationError):
    """Solver did not return before the external safety timeout"""
    pass

class SolverInternalError(OptimizationError):
    """Solver returned a malformed or missing result"""
    pass

def describe_error(error: Exception) -> str:
    """Human readable message prefixed with the error class name"""
    return f"{type(error).__name__}: {error}"

def handle_errors(default_return=None, raise_on_error=True):
    """Decorator for error handling"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except ShelfSpaceError:
                if raise_on_error:
                    raise
                return default_return
            except Exception as e:
                if raise_on_error:
                    raise ShelfSpaceError(f"Unexpected error in {func.__name__}: {str(e)}") from e
                return default_return
        return wrapper
    return decorator
