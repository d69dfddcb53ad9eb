"""Application service: Payment Initiator.

Starts a payment but never confirms one.  Maya goes through a hosted
checkout redirect; GCash shows a static QR reference that the shop
reconciles by hand, after which an admin marks the order paid.
"""

from __future__ import annotations

from urllib.parse import urlencode

from storefront.application.dto import PaymentInstruction
from storefront.domain.exceptions import ConfigurationError
from storefront.domain.model.order import PaymentMethod
from storefront.domain.model.value_objects import Money


class PaymentInitiator:

    def __init__(
        self,
        maya_checkout_url: str,
        maya_public_key: str,
        gcash_qr_reference: str,
    ) -> None:
        self._maya_checkout_url = maya_checkout_url
        self._maya_public_key = maya_public_key
        self._gcash_qr_reference = gcash_qr_reference

    def check(self, method: PaymentMethod) -> None:
        """Raise ConfigurationError if *method* cannot be started."""
        if method == PaymentMethod.MAYA and not self._maya_public_key:
            raise ConfigurationError("MAYA_PUBLIC_KEY is not configured")

    def initiate(
        self, order_id: str, amount: Money, method: PaymentMethod
    ) -> PaymentInstruction:
        self.check(method)
        if method == PaymentMethod.MAYA:
            query = urlencode(
                {
                    "public_key": self._maya_public_key,
                    "amount": f"{amount.amount:.2f}",
                    "order_id": order_id,
                }
            )
            return PaymentInstruction(
                method=method.value,
                kind="redirect",
                target=f"{self._maya_checkout_url}?{query}",
                amount=str(amount),
            )

        return PaymentInstruction(
            method=method.value,
            kind="qr",
            target=self._gcash_qr_reference,
            amount=str(amount),
        )
