from .data_loader import DataLoader, Scenario
from .data_validator import DataValidator

__all__ = ['DataLoader', 'Scenario', 'DataValidator']
