from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from shelfspace.models.product import Product
from shelfspace.models.shelf import Gondola, get_visibility_level

class SolveStatus(Enum):
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    ERROR = "error"

@dataclass(frozen=True)
class Assignment:
    """All facings granted to one product on one shelf"""
    product_id: str
    gondola_id: str
    shelf_id: str
    slot_id: str  # representative (lowest index) slot
    facings: int
    slot_ids: Tuple[str, ...] = ()

@dataclass
class SolveResult:
    """Outcome of one optimizer invocation"""
    status: SolveStatus
    assignments: List[Assignment] = field(default_factory=list)
    objective_value: float = 0.0
    unassigned_products: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    message: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    model_stats: Dict[str, int] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE)

    @property
    def total_facings(self) -> int:
        return sum(a.facings for a in self.assignments)

    def facings_by_product(self) -> Dict[str, int]:
        facings: Dict[str, int] = {}
        for assignment in self.assignments:
            facings[assignment.product_id] = facings.get(assignment.product_id, 0) + assignment.facings
        return facings

    def get_summary(self) -> Dict[str, Any]:
        """Get optimization summary"""
        return {
            'status': self.status.value,
            'products_placed': len(self.facings_by_product()),
            'products_unassigned': len(self.unassigned_products),
            'total_facings': self.total_facings,
            'objective_value': self.objective_value,
            'elapsed_seconds': self.elapsed_seconds,
            'warnings': len(self.warnings),
            'message': self.message,
        }

    def shelf_summary(self, gondolas: Sequence[Gondola], products: Sequence[Product]) -> List[Dict[str, Any]]:
        """Occupied slots and expected profit for every shelf of the layout"""
        product_lookup = {p.product_id: p for p in products}
        rows = []
        for gondola in gondolas:
            for shelf in gondola.shelves:
                visibility = shelf.resolve_visibility(len(gondola.shelves))
                shelf_assignments = [a for a in self.assignments if a.shelf_id == shelf.shelf_id]
                occupied = sum(a.facings for a in shelf_assignments)
                profit = sum(
                    product_lookup[a.product_id].expected_profit * a.facings
                    for a in shelf_assignments if a.product_id in product_lookup
                )
                rows.append({
                    'gondola_id': gondola.gondola_id,
                    'shelf_id': shelf.shelf_id,
                    'shelf_number': shelf.number,
                    'visibility': visibility,
                    'visibility_level': get_visibility_level(visibility),
                    'occupied_slots': occupied,
                    'total_slots': max(shelf.slot_count, 0),
                    'distinct_products': len({a.product_id for a in shelf_assignments}),
                    'expected_profit': profit,
                })
        return rows

    def to_dataframe(self) -> pd.DataFrame:
        """Assignments as a table, one row per (product, shelf)"""
        columns = ['product_id', 'gondola_id', 'shelf_id', 'slot_id', 'facings', 'slot_ids']
        rows = [
            {
                'product_id': a.product_id,
                'gondola_id': a.gondola_id,
                'shelf_id': a.shelf_id,
                'slot_id': a.slot_id,
                'facings': a.facings,
                'slot_ids': ', '.join(a.slot_ids),
            }
            for a in self.assignments
        ]
        return pd.DataFrame(rows, columns=columns)
