from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from shelfspace.models.product import Product
from shelfspace.models.shelf import Slot
from shelfspace.optimization.result import Assignment
from shelfspace.utils.logger import get_logger

@dataclass
class ExtractionResult:
    assignments: List[Assignment] = field(default_factory=list)
    objective_value: float = 0.0
    unassigned_products: List[str] = field(default_factory=list)

def extract_assignments(model, outcome, products: Sequence[Product]) -> ExtractionResult:
    """Decode the solved placement variables into grouped assignments"""
    logger = get_logger()

    # (product_id, shelf_id) -> slots used
    groups: Dict[Tuple[str, str], List[Slot]] = {}
    selected = 0
    for (product_id, slot_id, _rank), value in outcome.values.items():
        if value != 1:
            continue
        selected += 1
        slot = model.slots[slot_id]
        groups.setdefault((product_id, slot.shelf_id), []).append(slot)

    order = {p.product_id: i for i, p in enumerate(products)}
    assignments = []
    for (product_id, shelf_id), slots in groups.items():
        slots.sort(key=lambda s: s.index)
        assignments.append(Assignment(
            product_id=product_id,
            gondola_id=slots[0].gondola_id,
            shelf_id=shelf_id,
            slot_id=slots[0].slot_id,
            facings=len(slots),
            slot_ids=tuple(s.slot_id for s in slots),
        ))
    assignments.sort(key=lambda a: (order.get(a.product_id, len(order)), a.gondola_id, a.shelf_id))

    assigned_ids = {a.product_id for a in assignments}
    unassigned = [p.product_id for p in products if p.product_id not in assigned_ids]

    logger.info(
        f"Extracted {len(assignments)} assignments from {selected} selected facings, "
        f"{len(unassigned)} products unassigned"
    )
    return ExtractionResult(
        assignments=assignments,
        objective_value=outcome.objective_value,
        unassigned_products=unassigned,
    )
