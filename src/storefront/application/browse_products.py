"""Application service: Browse Products use case (query).

Products without a stored QR code get a generated one that links to the
order form, so printed flyers and chat replies can point at a product.
"""

from __future__ import annotations

from urllib.parse import quote

from storefront.application.dto import ProductDTO
from storefront.domain.repository.order_store import OrderStore

QR_CHART_URL = "https://chart.googleapis.com/chart?chs=200x200&cht=qr&chl="


def order_link_qr_url(storefront_url: str, product_id: str) -> str:
    """QR image URL encoding the order-form link for *product_id*."""
    order_url = f"{storefront_url.rstrip('/')}/order?id={product_id}"
    return QR_CHART_URL + quote(order_url, safe="")


class ListProductsHandler:

    def __init__(self, store: OrderStore, storefront_url: str = "") -> None:
        self._store = store
        self._storefront_url = storefront_url

    def handle(self, search: str = "") -> list[ProductDTO]:
        return [
            self._to_dto(p) for p in self._store.list_products() if p.matches(search)
        ]

    def _to_dto(self, product) -> ProductDTO:
        qr = None
        if self._storefront_url:
            qr = order_link_qr_url(self._storefront_url, product.id)
        return ProductDTO.from_product(product, qr_code_url=qr)


class ShowProductHandler:

    def __init__(self, store: OrderStore) -> None:
        self._store = store

    def handle(self, product_id: str) -> ProductDTO:
        return ProductDTO.from_product(self._store.get_product(product_id))
