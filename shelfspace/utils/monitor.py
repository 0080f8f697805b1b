import time
from collections import deque
from functools import wraps
from typing import Dict

from shelfspace.utils.logger import get_logger

class PerformanceMonitor:
    """Monitor system performance"""

    def __init__(self, history_size: int = 50):
        # Most recent (function, seconds) pairs only
        self.metrics = deque(maxlen=history_size)

    def time_it(self, func):
        """Decorator to time function execution"""
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.time()
            result = func(*args, **kwargs)
            duration = time.time() - start
            self.metrics.append((func.__qualname__, duration))
            get_logger().debug(f"⏱️  {func.__qualname__} took {duration:.2f}s")
            return result
        return wrapper

    def get_timings(self) -> Dict[str, float]:
        """Latest recorded duration per timed function"""
        return {name: duration for name, duration in self.metrics}

monitor = PerformanceMonitor()
