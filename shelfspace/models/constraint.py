from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Union

from shelfspace.utils.error_handler import ValidationError

ALLOW_MODES = ('allow', 'permitir')
DENY_MODES = ('deny', 'excluir')

@dataclass(frozen=True)
class Allow:
    """Only the listed categories may be placed (empty set allows everything)"""
    categories: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, 'categories', _freeze(self.categories))

    def permits(self, product_categories: Iterable[str]) -> bool:
        if not self.categories:
            return True
        return not self.categories.isdisjoint(product_categories)

@dataclass(frozen=True)
class Deny:
    """The listed categories are forbidden"""
    categories: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, 'categories', _freeze(self.categories))

    def permits(self, product_categories: Iterable[str]) -> bool:
        return self.categories.isdisjoint(product_categories)

ShelfConstraint = Union[Allow, Deny]

def _freeze(categories) -> FrozenSet[str]:
    if isinstance(categories, str):
        return frozenset([categories])
    return frozenset(categories)

def constraint_from_dict(data: Optional[Dict]) -> Optional[ShelfConstraint]:
    """Parse ``{"mode": "allow"|"deny", "categories": [...]}``"""
    if not data:
        return None
    mode = str(data.get('mode', 'allow')).lower()
    categories = data.get('categories', ())
    if mode in ALLOW_MODES:
        return Allow(categories)
    if mode in DENY_MODES:
        return Deny(categories)
    raise ValidationError(f"Unknown shelf constraint mode: {data.get('mode')!r}")

def is_category_allowed(product_categories: Iterable[str],
                        constraint: Optional[ShelfConstraint]) -> bool:
    """Check a product's categories against a shelf constraint"""
    if constraint is None:
        return True
    return constraint.permits(product_categories)
