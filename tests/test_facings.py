import pytest

from shelfspace.models.solver_config import SolverConfig
from shelfspace.optimization.facings import (
    calculate_product_score,
    estimate_all,
    estimate_desired_facings,
    facing_capacity,
)

def test_score_normalizes_velocity_against_reference(make_product):
    config = SolverConfig()
    product = make_product("p", margin=0.5, sales_velocity=250)
    assert calculate_product_score(product, config) == pytest.approx(0.6 * 0.5 + 0.4 * 0.5)

    fast = make_product("fast", margin=0.0, sales_velocity=5000)
    assert calculate_product_score(fast, config) == pytest.approx(0.4)

    custom = SolverConfig(velocity_reference=1000)
    assert calculate_product_score(product, custom) == pytest.approx(0.3 + 0.4 * 0.25)

@pytest.mark.parametrize("margin,velocity,max_facings,expected", [
    # score >= 0.7
    (1.0, 400, 5, 5),
    (1.0, 200, 5, 4),
    (1.0, 200, 3, 3),
    (1.0, 200, 2, 2),
    # score >= 0.5
    (0.6, 200, 3, 3),
    (0.8, 50, 3, 2),
    # score >= 0.3
    (0.5, 80, 3, 2),
    (0.5, 20, 3, 1),
    # below
    (0.1, 10, 3, 1),
])
def test_facing_policy_bands(make_product, margin, velocity, max_facings, expected):
    config = SolverConfig(max_facings_per_product=max_facings)
    product = make_product("p", margin=margin, sales_velocity=velocity)
    assert estimate_desired_facings(product, config) == expected

def test_preset_desired_facings_win_but_are_clamped(make_product):
    config = SolverConfig(max_facings_per_product=3)
    assert estimate_desired_facings(make_product("a", margin=0.0, desired_facings=2), config) == 2
    assert estimate_desired_facings(make_product("b", desired_facings=7), config) == 3

def test_scenario_product_gets_one_facing(make_product):
    product = make_product("p", price=10, margin=0.3, sales_velocity=100, stock=5)
    assert estimate_desired_facings(product, SolverConfig()) == 1

def test_estimate_all_and_capacity(make_product):
    config = SolverConfig(max_facings_per_product=4)
    products = [
        make_product("a", desired_facings=4, stock=2),
        make_product("b", desired_facings=3, stock=0),
    ]
    desired = estimate_all(products, config)
    assert desired == {"a": 4, "b": 3}
    assert facing_capacity(products[0], desired["a"], config) == 2
    assert facing_capacity(products[1], desired["b"], config) == 0
