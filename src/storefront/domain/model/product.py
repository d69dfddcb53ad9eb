"""Product aggregate.

Products are owned by the Order Store; the storefront only reads them.
Stock is decremented by the Store when an order is created.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog."""

    id: str
    name: str
    price: Money
    stock: int = 0
    description: str = ""
    size: str = ""
    category: str = ""
    image_url: str | None = None
    qr_code_url: str | None = None

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock for {self.name} cannot be negative")

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def can_supply(self, quantity: int) -> bool:
        """True if an order of *quantity* units may be placed right now."""
        return 0 < quantity <= self.stock

    def matches(self, term: str) -> bool:
        """Case-insensitive search over name, description and category."""
        if not term:
            return True
        needle = term.lower()
        return any(
            needle in (value or "").lower()
            for value in (self.name, self.description, self.category)
        )
