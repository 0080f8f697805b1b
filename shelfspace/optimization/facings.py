from typing import Dict, Sequence

from shelfspace.models.product import Product
from shelfspace.models.solver_config import SolverConfig
from shelfspace.utils import constants

def calculate_product_score(product: Product, config: SolverConfig) -> float:
    """Weighted margin / normalized velocity score, roughly within [0, 1]"""
    normalized_sales = min(product.sales_velocity / config.velocity_reference, 1.0)
    return config.margin_weight * product.margin + config.sales_weight * normalized_sales

def estimate_desired_facings(product: Product, config: SolverConfig) -> int:
    """How many facings a product would like to occupy.

    A preset ``desired_facings`` wins; otherwise the target comes from the
    score bands below (first match wins). The result is an upper bound for
    the model, never optimized itself.
    """
    max_facings = config.max_facings_per_product

    if product.desired_facings and product.desired_facings > 0:
        facings = product.desired_facings
    else:
        score = calculate_product_score(product, config)
        velocity = product.sales_velocity

        if score >= constants.HIGH_SCORE:
            # High margin and rotation
            facings = max_facings if velocity >= constants.HIGH_VELOCITY else max(3, max_facings - 1)
        elif score >= constants.MEDIUM_SCORE:
            facings = 3 if velocity >= constants.MEDIUM_VELOCITY else 2
        elif score >= constants.LOW_SCORE:
            facings = 2 if velocity >= constants.LOW_VELOCITY else 1
        else:
            facings = 1

    return max(1, min(int(facings), max_facings))

def estimate_all(products: Sequence[Product], config: SolverConfig) -> Dict[str, int]:
    return {p.product_id: estimate_desired_facings(p, config) for p in products}

def facing_capacity(product: Product, desired: int, config: SolverConfig) -> int:
    """Most facings the product can receive across the whole layout"""
    return max(0, min(desired, config.max_facings_per_product, product.stock))
