"""Application service: Address lookup (query)."""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.repository.order_store import AddressOption, OrderStore

ADDRESS_LEVELS = ("province", "city", "barangay")


class LookupAddressHandler:

    def __init__(self, store: OrderStore) -> None:
        self._store = store

    def handle(self, level: str, parent_id: str = "") -> list[AddressOption]:
        if level not in ADDRESS_LEVELS:
            raise ValidationError(
                f"Unknown address level '{level}', expected one of {', '.join(ADDRESS_LEVELS)}"
            )
        if level != "province" and not parent_id:
            raise ValidationError(f"A parent id is required to list {level} options")
        return self._store.get_addresses(level, parent_id)
