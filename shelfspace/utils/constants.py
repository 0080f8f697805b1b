"""System-wide constants"""

# Objective weights used by the facing target score
MARGIN_WEIGHT = 0.6
SALES_WEIGHT = 0.4

# Sales velocity treated as "maximum" when normalizing (units per period)
VELOCITY_REFERENCE = 500.0

# Facing target policy: (minimum score, velocity threshold)
HIGH_SCORE = 0.7
HIGH_VELOCITY = 300
MEDIUM_SCORE = 0.5
MEDIUM_VELOCITY = 150
LOW_SCORE = 0.3
LOW_VELOCITY = 75

# Solver settings
MAX_EXECUTION_SECONDS = 30.0
TIMEOUT_MARGIN_SECONDS = 5.0
SOLVER_BACKEND = 'SCIP'

# Placement rules
MIN_DIVERSITY_FRACTION = 0.7
MAX_FACINGS_PER_PRODUCT = 3
MIN_FACINGS_PER_PRODUCT = 1
MIN_DISTINCT_PRODUCTS = 2

# Shelf visibility
MIN_VISIBILITY = 0.25
MAX_VISIBILITY = 1.0
MIN_DERIVED_VISIBILITY = 0.5

VISIBILITY_LEVELS = [
    (0.9, 'Excellent'),
    (0.8, 'Very good'),
    (0.7, 'Good'),
    (0.6, 'Fair'),
]
