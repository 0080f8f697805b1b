import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from shelfspace.models.constraint import ShelfConstraint, constraint_from_dict
from shelfspace.utils.constants import (
    MAX_VISIBILITY,
    MIN_DERIVED_VISIBILITY,
    MIN_VISIBILITY,
    VISIBILITY_LEVELS,
)

def calculate_visibility_factor(shelf_number: int, total_shelves: int) -> float:
    """Visibility of a shelf from its height in the gondola.

    Shelves are numbered bottom to top starting at 1. The eye-level shelf
    (middle of the stack) scores 1.0 and the factor decreases linearly with
    the distance to it, down to 0.5 at the farthest shelf.
    """
    if total_shelves <= 1:
        return MAX_VISIBILITY
    eye_level = math.ceil(total_shelves / 2)
    distance = abs(shelf_number - eye_level)
    max_distance = max(eye_level - 1, total_shelves - eye_level)
    factor = MAX_VISIBILITY - (distance / max_distance) * 0.5
    return max(MIN_DERIVED_VISIBILITY, min(MAX_VISIBILITY, factor))

def get_visibility_level(factor: float) -> str:
    """Textual description of a visibility factor"""
    for threshold, label in VISIBILITY_LEVELS:
        if factor >= threshold:
            return label
    return 'Low'

@dataclass(frozen=True)
class Slot:
    """One discrete unit of shelf space holding a single facing"""
    slot_id: str
    gondola_id: str
    shelf_id: str
    index: int
    shelf_number: int
    shelf_count: int
    visibility: float

@dataclass
class Shelf:
    """Shelf data model"""
    shelf_id: str
    number: int  # 1-based, bottom to top
    slot_count: int
    visibility: Optional[float] = None
    constraint: Optional[ShelfConstraint] = None

    def resolve_visibility(self, total_shelves: int) -> float:
        """Explicit visibility clamped to range, or derived from height"""
        if self.visibility is None:
            return calculate_visibility_factor(self.number, total_shelves)
        return max(MIN_VISIBILITY, min(MAX_VISIBILITY, float(self.visibility)))

    @classmethod
    def from_dict(cls, data: Dict, number: int) -> 'Shelf':
        visibility = data.get('visibility', data.get('visibilityWeight'))
        return cls(
            shelf_id=str(data.get('shelf_id', data.get('id'))),
            number=int(data.get('number', number)),
            slot_count=int(data.get('slot_count', data.get('slotCount', 0))),
            visibility=float(visibility) if visibility is not None else None,
            constraint=constraint_from_dict(data.get('constraint')),
        )

@dataclass
class Gondola:
    """Physical fixture made of an ordered stack of shelves"""
    gondola_id: str
    shelves: List[Shelf] = field(default_factory=list)
    name: Optional[str] = None

    @property
    def total_slots(self) -> int:
        return sum(max(shelf.slot_count, 0) for shelf in self.shelves)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Gondola':
        shelves = [
            Shelf.from_dict(shelf_data, number)
            for number, shelf_data in enumerate(data.get('shelves', []), start=1)
        ]
        return cls(
            gondola_id=str(data.get('gondola_id', data.get('id'))),
            shelves=shelves,
            name=data.get('name'),
        )
