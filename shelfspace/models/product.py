from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional

@dataclass(frozen=True)
class Product:
    """Catalog product offered to the optimizer"""
    product_id: str
    price: float
    margin: float  # profit margin fraction, 0 to 1
    sales_velocity: float  # units sold in the recent period
    stock: int
    categories: FrozenSet[str] = field(default_factory=frozenset)

    # Pre-set facing target, estimated from the score when missing
    desired_facings: Optional[int] = None
    name: Optional[str] = None

    def __post_init__(self):
        # Accept any iterable of tags (or a single tag) and freeze it
        categories = self.categories
        if isinstance(categories, str):
            categories = [categories]
        object.__setattr__(self, 'categories', frozenset(categories))

    @property
    def display_name(self) -> str:
        return self.name or self.product_id

    @property
    def expected_profit(self) -> float:
        """Profit per facing before the slot visibility multiplier"""
        return self.margin * self.price * self.sales_velocity

    @classmethod
    def from_dict(cls, data: Dict) -> 'Product':
        """Build a product from a loosely typed record"""
        categories: Iterable[str] = data.get('categories', data.get('category', ()))
        desired = data.get('desired_facings', data.get('desiredFacings'))
        return cls(
            product_id=str(data.get('product_id', data.get('id'))),
            price=float(data['price']),
            margin=float(data['margin']),
            sales_velocity=float(data.get('sales_velocity', data.get('salesVelocity', 0))),
            stock=int(data.get('stock', 0)),
            categories=categories,
            desired_facings=int(desired) if desired else None,
            name=data.get('name'),
        )
