from typing import List, Sequence, Tuple
from datetime import datetime

from shelfspace.models.product import Product
from shelfspace.models.shelf import Gondola
from shelfspace.utils.constants import MAX_VISIBILITY, MIN_VISIBILITY
from shelfspace.utils.error_handler import ValidationError

class DataValidator:
    """Validate optimizer inputs before a model is built"""

    def __init__(self):
        self.warnings = []
        self.errors = []
        self.checked = {'products': 0, 'gondolas': 0, 'shelves': 0, 'slots': 0}

    def validate_products(self, products: Sequence[Product]) -> Tuple[bool, List[str]]:
        """Validate product data and return (is_valid, issues).

        An empty catalog is valid: it solves to an empty assignment.
        """
        self.warnings = []
        self.errors = []
        self.checked['products'] = len(products)

        # Check for duplicates
        product_ids = [p.product_id for p in products]
        if len(product_ids) != len(set(product_ids)):
            duplicates = sorted({pid for pid in product_ids if product_ids.count(pid) > 1})
            self.errors.append(f"Duplicate product IDs found: {duplicates}")

        for product in products:
            self._validate_single_product(product)

        return len(self.errors) == 0, self.errors + self.warnings

    def _validate_single_product(self, product: Product):
        """Validate individual product data"""
        name = product.display_name
        if product.price <= 0:
            self.errors.append(f"{name}: Price must be positive ({product.price})")

        if not 0 <= product.margin <= 1:
            self.errors.append(f"{name}: Margin must be a fraction between 0 and 1 ({product.margin})")

        if product.sales_velocity < 0:
            self.errors.append(f"{name}: Negative sales velocity")

        if product.stock < 0 or int(product.stock) != product.stock:
            self.errors.append(f"{name}: Stock must be a non-negative integer ({product.stock})")
        elif product.stock == 0:
            self.warnings.append(f"{name}: No stock available, it cannot be placed")

        if not product.categories:
            self.errors.append(f"{name}: No category tags")

        if product.desired_facings is not None and product.desired_facings < 1:
            self.errors.append(f"{name}: Desired facings must be >= 1")

    def validate_layout(self, gondolas: Sequence[Gondola]) -> Tuple[bool, List[str]]:
        """Validate the shelf layout and return (is_valid, issues)"""
        errors = []
        warnings = []
        seen = set()

        self.checked['gondolas'] = len(gondolas)
        self.checked['shelves'] = sum(len(g.shelves) for g in gondolas)
        self.checked['slots'] = sum(g.total_slots for g in gondolas)

        for gondola in gondolas:
            if not gondola.shelves:
                warnings.append(f"Gondola {gondola.gondola_id} has no shelves")
            elif gondola.total_slots == 0:
                warnings.append(f"Gondola {gondola.gondola_id} has shelves but no slots")
            for shelf in gondola.shelves:
                if shelf.shelf_id in seen:
                    errors.append(f"Duplicate shelf ID {shelf.shelf_id}")
                seen.add(shelf.shelf_id)

                if shelf.slot_count < 0:
                    errors.append(f"Shelf {shelf.shelf_id} has a negative slot count ({shelf.slot_count})")
                elif shelf.slot_count == 0:
                    warnings.append(f"Shelf {shelf.shelf_id} has no slots")

                if shelf.visibility is not None and not MIN_VISIBILITY <= shelf.visibility <= MAX_VISIBILITY:
                    warnings.append(
                        f"Shelf {shelf.shelf_id} visibility {shelf.visibility} outside "
                        f"[{MIN_VISIBILITY}, {MAX_VISIBILITY}], clamped"
                    )

        self.errors.extend(errors)
        self.warnings.extend(warnings)
        return len(errors) == 0, errors + warnings

    def check(self, products: Sequence[Product], gondolas: Sequence[Gondola]) -> List[str]:
        """Validate everything, raise ValidationError on errors and return warnings"""
        self.validate_products(products)
        self.validate_layout(gondolas)
        if self.errors:
            raise ValidationError("Invalid input: " + "; ".join(self.errors))
        return list(self.warnings)

    def generate_validation_report(self) -> str:
        """Summarize what was checked and whether the optimizer will accept it"""
        checked = self.checked
        lines = [
            "INPUT VALIDATION REPORT",
            "=" * 50,
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"Checked: {checked['products']} products, {checked['gondolas']} gondolas, "
            f"{checked['shelves']} shelves, {checked['slots']} slots",
            "",
        ]

        for title, marker, issues in (("Blocking errors", "❌", self.errors),
                                      ("Warnings", "⚠️ ", self.warnings)):
            if issues:
                lines.append(f"{title} ({len(issues)}):")
                lines.extend(f"  {marker} {issue}" for issue in issues)
                lines.append("")

        if self.errors:
            lines.append("The optimizer will reject these inputs until the errors are fixed.")
        else:
            lines.append("✅ Inputs are ready for optimization")
        return "\n".join(lines)
