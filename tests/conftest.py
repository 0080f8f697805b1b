import os

# Keep test runs from writing log files
os.environ.setdefault("SHELFSPACE_LOG_DIR", "")

import pytest

from shelfspace.models.constraint import Allow, Deny
from shelfspace.models.product import Product
from shelfspace.models.shelf import Gondola, Shelf
from shelfspace.models.solver_config import SolverConfig

@pytest.fixture
def make_product():
    def _make(product_id, price=10.0, margin=0.3, sales_velocity=100.0, stock=5,
              categories=("Bebidas",), desired_facings=None):
        return Product(
            product_id=product_id,
            price=price,
            margin=margin,
            sales_velocity=sales_velocity,
            stock=stock,
            categories=categories,
            desired_facings=desired_facings,
        )
    return _make

@pytest.fixture
def single_shelf():
    """Layout with one gondola holding one shelf"""
    def _make(slot_count, constraint=None, visibility=1.0, shelf_id="s1", gondola_id="g1"):
        shelf = Shelf(shelf_id=shelf_id, number=1, slot_count=slot_count,
                      visibility=visibility, constraint=constraint)
        return [Gondola(gondola_id=gondola_id, shelves=[shelf])]
    return _make

@pytest.fixture
def config():
    return SolverConfig(max_execution_seconds=10.0)

@pytest.fixture
def store_layout():
    """Two gondolas with mixed category rules"""
    return [
        Gondola(gondola_id="g1", shelves=[
            Shelf("g1-s1", 1, 4, constraint=Allow({"Bebidas"})),
            Shelf("g1-s2", 2, 5),
            Shelf("g1-s3", 3, 4, constraint=Deny({"Lacteos"})),
        ]),
        Gondola(gondola_id="g2", shelves=[
            Shelf("g2-s1", 1, 3, visibility=0.4),
            Shelf("g2-s2", 2, 4, visibility=0.9, constraint=Allow({"Lacteos", "Panaderia"})),
        ]),
    ]

@pytest.fixture
def catalog(make_product):
    return [
        make_product("cola", price=2.5, margin=0.35, sales_velocity=420, stock=20),
        make_product("water", price=1.0, margin=0.2, sales_velocity=300, stock=3),
        make_product("milk", price=1.8, margin=0.15, sales_velocity=260, stock=10, categories=("Lacteos",)),
        make_product("yogurt", price=0.9, margin=0.4, sales_velocity=80, stock=6, categories=("Lacteos",)),
        make_product("bread", price=2.2, margin=0.5, sales_velocity=150, stock=8, categories=("Panaderia",)),
        make_product("juice", price=3.1, margin=0.6, sales_velocity=40, stock=0),
        make_product("snack", price=1.5, margin=0.45, sales_velocity=210, stock=12, categories=("Otros",)),
    ]
