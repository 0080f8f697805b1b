from typing import Dict, List, Sequence

from shelfspace.models.constraint import ShelfConstraint
from shelfspace.models.shelf import Gondola, Slot
from shelfspace.utils.logger import get_logger

def make_slot_id(gondola_id: str, shelf_id: str, index: int) -> str:
    return f"{gondola_id}:{shelf_id}:{index}"

def extract_positions(gondolas: Sequence[Gondola]) -> List[Slot]:
    """Flatten gondolas -> shelves -> slot counts into atomic slots"""
    slots = []
    for gondola in gondolas:
        shelf_count = len(gondola.shelves)
        for shelf in gondola.shelves:
            visibility = shelf.resolve_visibility(shelf_count)
            for index in range(max(shelf.slot_count, 0)):
                slots.append(Slot(
                    slot_id=make_slot_id(gondola.gondola_id, shelf.shelf_id, index),
                    gondola_id=gondola.gondola_id,
                    shelf_id=shelf.shelf_id,
                    index=index,
                    shelf_number=shelf.number,
                    shelf_count=shelf_count,
                    visibility=visibility,
                ))

    get_logger().debug(f"Extracted {len(slots)} slots from {len(gondolas)} gondolas")
    return slots

def extract_category_constraints(gondolas: Sequence[Gondola]) -> Dict[str, ShelfConstraint]:
    """Shelf id -> category rule, unconstrained shelves are left out"""
    return {
        shelf.shelf_id: shelf.constraint
        for gondola in gondolas
        for shelf in gondola.shelves
        if shelf.constraint is not None
    }
