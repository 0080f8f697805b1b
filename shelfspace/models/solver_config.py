from dataclasses import dataclass, fields, replace
from typing import Dict

from shelfspace.utils import constants
from shelfspace.utils.error_handler import ConfigurationError

# Keys used by the layout editor's configuration panel
_CAMEL_CASE_KEYS = {
    'marginWeight': 'margin_weight',
    'salesWeight': 'sales_weight',
    'maxExecutionSeconds': 'max_execution_seconds',
    'maxExecutionTime': 'max_execution_seconds',
    'minDiversityFraction': 'min_diversity_fraction',
    'maxFacingsPerProduct': 'max_facings_per_product',
    'minFacingsPerProduct': 'min_facings_per_product',
    'velocityReference': 'velocity_reference',
    'timeoutMarginSeconds': 'timeout_margin_seconds',
    'solverBackend': 'solver_backend',
}

_INT_FIELDS = ('max_facings_per_product', 'min_facings_per_product')
_FLOAT_FIELDS = (
    'margin_weight',
    'sales_weight',
    'max_execution_seconds',
    'min_diversity_fraction',
    'velocity_reference',
    'timeout_margin_seconds',
)

@dataclass(frozen=True)
class SolverConfig:
    """Tunable parameters of one optimizer run"""
    margin_weight: float = constants.MARGIN_WEIGHT
    sales_weight: float = constants.SALES_WEIGHT
    max_execution_seconds: float = constants.MAX_EXECUTION_SECONDS
    min_diversity_fraction: float = constants.MIN_DIVERSITY_FRACTION
    max_facings_per_product: int = constants.MAX_FACINGS_PER_PRODUCT
    min_facings_per_product: int = constants.MIN_FACINGS_PER_PRODUCT
    velocity_reference: float = constants.VELOCITY_REFERENCE
    timeout_margin_seconds: float = constants.TIMEOUT_MARGIN_SECONDS
    solver_backend: str = constants.SOLVER_BACKEND

    @property
    def external_timeout(self) -> float:
        """Wall-clock budget enforced around the solver's own time limit"""
        return self.max_execution_seconds + self.timeout_margin_seconds

    def validate(self) -> 'SolverConfig':
        """Raise ConfigurationError when a value is out of range or of the wrong type"""
        wrong_type = [
            f.name for f in fields(self)
            if f.name != 'solver_backend' and (
                isinstance(getattr(self, f.name), bool)
                or not isinstance(getattr(self, f.name), (int, float))
            )
        ]
        if not isinstance(self.solver_backend, str):
            wrong_type.append('solver_backend')
        if wrong_type:
            raise ConfigurationError(
                "Invalid solver configuration: wrong value type for " + ", ".join(wrong_type)
            )

        issues = []
        if self.margin_weight < 0 or self.sales_weight < 0:
            issues.append("objective weights must be >= 0")
        if self.max_execution_seconds <= 0:
            issues.append("max_execution_seconds must be > 0")
        if not 0 <= self.min_diversity_fraction <= 1:
            issues.append("min_diversity_fraction must be within [0, 1]")
        if self.max_facings_per_product < 1:
            issues.append("max_facings_per_product must be >= 1")
        if not 1 <= self.min_facings_per_product <= self.max_facings_per_product:
            issues.append("min_facings_per_product must be within [1, max_facings_per_product]")
        if self.velocity_reference <= 0:
            issues.append("velocity_reference must be > 0")
        if self.timeout_margin_seconds < 0:
            issues.append("timeout_margin_seconds must be >= 0")

        if issues:
            raise ConfigurationError("Invalid solver configuration: " + "; ".join(issues))
        return self

    def with_overrides(self, **overrides) -> 'SolverConfig':
        return replace(self, **overrides)

    @classmethod
    def from_dict(cls, data: Dict) -> 'SolverConfig':
        """Build a config from snake_case or camelCase keys, ignoring unknown ones"""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known and value is not None:
                values[name] = value
        # JSON editors may send numbers as strings
        for name, value in values.items():
            if name in _INT_FIELDS:
                values[name] = int(value)
            elif name in _FLOAT_FIELDS:
                values[name] = float(value)
            else:
                values[name] = str(value)
        return cls(**values)
