import json

import pytest

from shelfspace.data_processing.data_loader import DataLoader
from shelfspace.data_processing.data_validator import DataValidator
from shelfspace.models.constraint import Allow, Deny
from shelfspace.models.product import Product
from shelfspace.models.shelf import Gondola, Shelf
from shelfspace.models.solver_config import SolverConfig
from shelfspace.utils.error_handler import ConfigurationError, ShelfSpaceError, ValidationError, handle_errors

SCENARIO = {
    "products": [
        {"id": "cola", "price": 2.5, "margin": 0.35, "salesVelocity": 320, "stock": 12,
         "category": "Bebidas", "name": "Cola 2L"},
        {"product_id": "milk", "price": 1.2, "margin": 0.2, "sales_velocity": 180, "stock": 6,
         "categories": ["Lacteos"], "desiredFacings": 2},
    ],
    "gondolas": [
        {"id": "g1", "name": "Drinks", "shelves": [
            {"id": "s1", "slotCount": 4, "constraint": {"mode": "permitir", "categories": ["Bebidas"]}},
            {"id": "s2", "slotCount": 3, "visibilityWeight": 0.8},
        ]},
    ],
    "config": {"maxExecutionTime": 12, "minDiversityFraction": 0.5, "maxFacingsPerProduct": "4",
               "unknownKey": True},
}

class TestDataValidator:

    def test_valid_inputs_pass(self, store_layout, catalog):
        validator = DataValidator()
        warnings = validator.check(catalog, store_layout)

        # juice has no stock
        assert any("No stock" in w for w in warnings)
        assert validator.errors == []

    def test_empty_catalog_is_valid(self):
        is_valid, issues = DataValidator().validate_products([])
        assert is_valid
        assert issues == []

    def test_product_errors_are_collected(self, make_product):
        products = [
            make_product("a", price=0),
            make_product("a", margin=1.5),
            make_product("b", sales_velocity=-1, stock=-2, categories=()),
            make_product("c", desired_facings=0),
        ]
        validator = DataValidator()
        is_valid, issues = validator.validate_products(products)

        assert not is_valid
        text = "\n".join(issues)
        assert "Duplicate product IDs found: ['a']" in text
        assert "Price must be positive" in text
        assert "Margin must be a fraction" in text
        assert "Negative sales velocity" in text
        assert "Stock must be a non-negative integer" in text
        assert "No category tags" in text
        assert "Desired facings must be >= 1" in text

    def test_layout_issues(self):
        gondolas = [
            Gondola("g1", [Shelf("s1", 1, 3), Shelf("s1", 2, -1)]),
            Gondola("g2", [Shelf("s2", 1, 0, visibility=1.4)]),
            Gondola("g3", []),
        ]
        is_valid, issues = DataValidator().validate_layout(gondolas)

        assert not is_valid
        text = "\n".join(issues)
        assert "Duplicate shelf ID s1" in text
        assert "negative slot count" in text
        assert "Shelf s2 has no slots" in text
        assert "clamped" in text
        assert "Gondola g3 has no shelves" in text
        assert "Gondola g2 has shelves but no slots" in text

    def test_check_raises_validation_error(self, make_product, single_shelf):
        with pytest.raises(ValidationError, match="Invalid input"):
            DataValidator().check([make_product("a", margin=-0.1)], single_shelf(2))

    def test_report_lists_errors_and_warnings(self, make_product):
        validator = DataValidator()
        validator.validate_products([make_product("a", price=-1), make_product("b", stock=0)])
        report = validator.generate_validation_report()

        assert "INPUT VALIDATION REPORT" in report
        assert "Blocking errors (1)" in report
        assert "Checked: 2 products" in report
        assert "reject these inputs" in report
        assert "Warnings (1)" in report

        clean = DataValidator()
        clean.validate_products([make_product("a")])
        assert "Inputs are ready for optimization" in clean.generate_validation_report()

class TestDataLoader:

    def test_load_scenario_from_data_path(self, tmp_path):
        (tmp_path / "store.json").write_text(json.dumps(SCENARIO), encoding="utf-8")
        scenario = DataLoader(str(tmp_path)).load_scenario("store")

        cola, milk = scenario.products
        assert cola == Product("cola", 2.5, 0.35, 320.0, 12, frozenset({"Bebidas"}), None, "Cola 2L")
        assert milk.categories == frozenset({"Lacteos"})
        assert milk.desired_facings == 2

        gondola = scenario.gondolas[0]
        assert gondola.name == "Drinks"
        assert gondola.total_slots == 7
        s1, s2 = gondola.shelves
        assert (s1.number, s2.number) == (1, 2)
        assert s1.constraint == Allow({"Bebidas"})
        assert s2.visibility == 0.8

        assert scenario.config.max_execution_seconds == 12
        assert scenario.config.min_diversity_fraction == 0.5
        assert scenario.config.max_facings_per_product == 4

    def test_explicit_path_and_missing_file(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"products": [], "gondolas": []}), encoding="utf-8")
        loader = DataLoader(str(tmp_path / "nowhere"))

        scenario = loader.load_scenario(path)
        assert scenario.products == []
        assert scenario.config == SolverConfig()

        with pytest.raises(FileNotFoundError):
            loader.load_scenario("missing.json")

    def test_malformed_records_raise_validation_error(self):
        loader = DataLoader()
        with pytest.raises(ValidationError, match="Malformed scenario"):
            loader.scenario_from_dict({"products": [{"id": "x", "margin": 0.2}]})
        with pytest.raises(ValidationError, match="Unknown shelf constraint mode"):
            loader.scenario_from_dict({"gondolas": [
                {"id": "g", "shelves": [{"id": "s", "slotCount": 1, "constraint": {"mode": "maybe"}}]},
            ]})

    def test_deny_constraint_modes(self):
        scenario = DataLoader().scenario_from_dict({"gondolas": [
            {"id": "g", "shelves": [{"id": "s", "slotCount": 1,
                                     "constraint": {"mode": "excluir", "categories": ["Limpieza"]}}]},
        ]})
        assert scenario.gondolas[0].shelves[0].constraint == Deny({"Limpieza"})

class TestSolverConfig:

    def test_defaults(self):
        config = SolverConfig().validate()
        assert (config.margin_weight, config.sales_weight) == (0.6, 0.4)
        assert config.max_execution_seconds == 30.0
        assert config.min_diversity_fraction == 0.7
        assert config.max_facings_per_product == 3
        assert config.external_timeout == pytest.approx(35.0)

    @pytest.mark.parametrize("overrides", [
        {"max_execution_seconds": 0},
        {"min_diversity_fraction": 1.5},
        {"max_facings_per_product": 0},
        {"min_facings_per_product": 5},
        {"margin_weight": -0.1},
        {"velocity_reference": 0},
        {"timeout_margin_seconds": -1},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigurationError):
            SolverConfig().with_overrides(**overrides).validate()

    def test_from_dict_coerces_numeric_strings(self):
        config = SolverConfig.from_dict({
            "maxExecutionSeconds": "10", "marginWeight": "0.5", "maxFacingsPerProduct": "4",
            "solverBackend": "CBC",
        })
        assert config.max_execution_seconds == 10.0
        assert config.margin_weight == 0.5
        assert config.max_facings_per_product == 4
        assert config.validate() is config

    def test_non_numeric_config_is_a_malformed_scenario(self):
        with pytest.raises(ValidationError, match="Malformed scenario"):
            DataLoader().scenario_from_dict({"config": {"maxExecutionSeconds": "ten"}})

    @pytest.mark.parametrize("overrides", [
        {"max_execution_seconds": "10"},
        {"min_diversity_fraction": None},
        {"max_facings_per_product": True},
        {"solver_backend": 3},
    ])
    def test_wrong_types_are_configuration_errors(self, overrides):
        with pytest.raises(ConfigurationError, match="wrong value type"):
            SolverConfig().with_overrides(**overrides).validate()

    def test_with_overrides_keeps_original(self):
        base = SolverConfig()
        changed = base.with_overrides(min_diversity_fraction=0.2)
        assert changed.min_diversity_fraction == 0.2
        assert base.min_diversity_fraction == 0.7

def test_handle_errors_wraps_unexpected_exceptions():
    @handle_errors()
    def broken():
        raise KeyError("slot")

    @handle_errors(default_return=[], raise_on_error=False)
    def quiet():
        raise ValueError("ignored")

    with pytest.raises(ShelfSpaceError, match="Unexpected error in broken"):
        broken()
    assert quiet() == []
