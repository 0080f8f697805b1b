import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Tuple

from ortools.linear_solver import pywraplp

from shelfspace.models.constraint import ShelfConstraint, is_category_allowed
from shelfspace.models.product import Product
from shelfspace.models.shelf import Slot
from shelfspace.models.solver_config import SolverConfig
from shelfspace.optimization.facings import facing_capacity
from shelfspace.optimization.solver_adapter import create_solver
from shelfspace.utils.constants import MIN_DISTINCT_PRODUCTS
from shelfspace.utils.error_handler import EmptyModelError
from shelfspace.utils.logger import get_logger
from shelfspace.utils.monitor import monitor

# (product_id, slot_id, facing_rank)
PlacementKey = Tuple[str, str, int]
# (product_id, shelf_id)
PresenceKey = Tuple[str, str]

def add_presence_indicator(solver: pywraplp.Solver, name: str,
                           members: Sequence[pywraplp.Variable]) -> pywraplp.Variable:
    """Binary that is 1 exactly when at least one member variable is 1.

    Linearized as ``member <= y`` for every member plus ``y <= sum(members)``.
    Adds ``len(members) + 1`` constraints.
    """
    indicator = solver.BoolVar(name)
    for member in members:
        solver.Add(member <= indicator)
    solver.Add(indicator <= solver.Sum(members))
    return indicator

def diversity_requirement(slot_count: int, fraction: float) -> int:
    """floor(fraction x slot count), tolerant to float noise such as 0.7 * 30"""
    return int(math.floor(fraction * slot_count + 1e-9))

@dataclass
class ShelfModel:
    """A built MILP plus the lookups needed to decode its solution"""
    solver: pywraplp.Solver
    x: Dict[PlacementKey, pywraplp.Variable]
    presence: Dict[PresenceKey, pywraplp.Variable]
    slots: Dict[str, Slot]
    desired_facings: Dict[str, int]
    blocked_combinations: int = 0
    constraint_counts: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def num_variables(self) -> int:
        return self.solver.NumVariables()

    @property
    def num_constraints(self) -> int:
        return self.solver.NumConstraints()

    def stats(self) -> Dict[str, int]:
        stats = {
            'placement_variables': len(self.x),
            'presence_variables': len(self.presence),
            'blocked_combinations': self.blocked_combinations,
            'constraints': self.num_constraints,
        }
        stats.update({f"constraints_{family}": count for family, count in self.constraint_counts.items()})
        return stats

class ModelBuilder:
    """Builds the shelf assignment MILP"""

    def __init__(self, config: SolverConfig):
        self.config = config
        self.logger = get_logger()

    @monitor.time_it
    def build(self, products: Sequence[Product], slots: Sequence[Slot],
              constraints: Mapping[str, ShelfConstraint],
              desired_facings: Mapping[str, int]) -> ShelfModel:
        """Create variables, objective and constraints.

        Raises EmptyModelError when no (product, slot) pair is eligible, so
        the solver is never invoked on an empty model.
        """
        config = self.config
        solver = create_solver(config.solver_backend)
        model = ShelfModel(
            solver=solver,
            x={},
            presence={},
            slots={slot.slot_id: slot for slot in slots},
            desired_facings=dict(desired_facings),
        )

        shelf_slots: Dict[str, List[Slot]] = {}
        for slot in slots:
            shelf_slots.setdefault(slot.shelf_id, []).append(slot)

        by_slot: Dict[str, List[pywraplp.Variable]] = {}
        by_product: Dict[str, List[pywraplp.Variable]] = {}
        by_product_shelf: Dict[PresenceKey, List[pywraplp.Variable]] = {}

        # Decision variables; category rules are enforced by omission
        objective = solver.Objective()
        for product in products:
            desired = desired_facings[product.product_id]
            for shelf_id, members in shelf_slots.items():
                if not is_category_allowed(product.categories, constraints.get(shelf_id)):
                    model.blocked_combinations += len(members)
                    continue
                for slot in members:
                    coefficient = product.expected_profit * slot.visibility
                    for rank in range(1, desired + 1):
                        var = solver.BoolVar(f"x[{product.product_id}|{slot.slot_id}|{rank}]")
                        objective.SetCoefficient(var, coefficient)
                        model.x[(product.product_id, slot.slot_id, rank)] = var
                        by_slot.setdefault(slot.slot_id, []).append(var)
                        by_product.setdefault(product.product_id, []).append(var)
                        by_product_shelf.setdefault((product.product_id, shelf_id), []).append(var)
        objective.SetMaximization()

        self.logger.debug(
            f"Created {len(model.x)} placement variables, "
            f"{model.blocked_combinations} product/slot combinations blocked by category rules"
        )

        if not model.x:
            raise EmptyModelError(
                f"No eligible product/slot combinations ({len(products)} products, {len(slots)} slots, "
                f"{model.blocked_combinations} combinations excluded by category rules)"
            )

        counts = model.constraint_counts

        # Each slot holds at most one product facing
        for slot_id, members in by_slot.items():
            solver.Add(solver.Sum(members) <= 1, f"slot[{slot_id}]")
        counts['slot_capacity'] = len(by_slot)

        # Per product facing caps
        product_lookup = {p.product_id: p for p in products}
        for product_id, members in by_product.items():
            product = product_lookup[product_id]
            desired = desired_facings[product_id]
            total = solver.Sum(members)
            solver.Add(total <= desired, f"facings[{product_id}]")
            solver.Add(total <= min(product.stock, desired), f"stock[{product_id}]")
            solver.Add(total <= config.max_facings_per_product, f"max_facings[{product_id}]")
        counts['facing_caps'] = 3 * len(by_product)

        # Presence indicators per (product, shelf)
        for key, members in by_product_shelf.items():
            product_id, shelf_id = key
            model.presence[key] = add_presence_indicator(solver, f"y[{product_id}|{shelf_id}]", members)
        counts['presence_links'] = sum(len(m) + 1 for m in by_product_shelf.values())

        self._add_diversity_constraints(model, shelf_slots, product_lookup)
        if config.min_facings_per_product > 1:
            self._add_min_facing_constraints(model, by_product_shelf)

        self.logger.info(
            f"Model built: {model.num_variables} variables, {model.num_constraints} constraints"
        )
        return model

    def _add_diversity_constraints(self, model: ShelfModel, shelf_slots: Dict[str, List[Slot]],
                                   product_lookup: Dict[str, Product]):
        """Lower bound on distinct products per shelf.

        Applied only when floor(fraction x slots) >= 2 and at least two
        products can actually be placed on the shelf; otherwise the shelf is
        skipped and a warning recorded.
        """
        config = self.config
        solver = model.solver
        applied = 0

        presence_by_shelf: Dict[str, List[Tuple[str, pywraplp.Variable]]] = {}
        for (product_id, shelf_id), var in model.presence.items():
            presence_by_shelf.setdefault(shelf_id, []).append((product_id, var))

        for shelf_id, members in shelf_slots.items():
            required = diversity_requirement(len(members), config.min_diversity_fraction)
            if required < MIN_DISTINCT_PRODUCTS:
                continue

            presence = []
            eligible = 0
            for product_id, var in presence_by_shelf.get(shelf_id, []):
                presence.append(var)
                product = product_lookup[product_id]
                capacity = facing_capacity(product, model.desired_facings[product_id], config)
                if capacity >= config.min_facings_per_product and len(members) >= config.min_facings_per_product:
                    eligible += 1

            if eligible < MIN_DISTINCT_PRODUCTS:
                warning = (
                    f"Diversity constraint skipped on shelf {shelf_id}: requires {required} distinct products "
                    f"but only {eligible} eligible product(s) can be placed there"
                )
                self.logger.warning(warning)
                model.warnings.append(warning)
                continue

            solver.Add(solver.Sum(presence) >= required, f"diversity[{shelf_id}]")
            applied += 1
            self.logger.debug(f"Shelf {shelf_id}: at least {required} distinct products")

        model.constraint_counts['diversity'] = applied

    def _add_min_facing_constraints(self, model: ShelfModel,
                                    by_product_shelf: Dict[PresenceKey, List[pywraplp.Variable]]):
        """A product present on a shelf gets at least the minimum facings there"""
        solver = model.solver
        minimum = self.config.min_facings_per_product
        for key, members in by_product_shelf.items():
            product_id, shelf_id = key
            solver.Add(
                solver.Sum(members) >= minimum * model.presence[key],
                f"min_facings[{product_id}|{shelf_id}]",
            )
        model.constraint_counts['min_facings'] = len(by_product_shelf)
