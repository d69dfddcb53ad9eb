"""Courier portal port and the shipment field mapper.

The dispatcher never sees how a portal locates its form fields.  It hands
the adapter a ``ShipmentFields`` structure built from an explicit, versioned
mapping table and gets back a ``TrackingId`` or a ``PortalError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.booking import (
    PortalCredentials,
    SenderProfile,
    ShipmentFields,
    TrackingId,
)
from storefront.domain.model.order import Order


@dataclass
class PortalSession:
    """An authenticated portal session.  Owned by one dispatch run."""

    username: str
    token: str = ""
    active: bool = True


class CourierPortal(ABC):
    """A courier booking portal.  Use as a context manager so it always closes."""

    @abstractmethod
    def authenticate(self, credentials: PortalCredentials) -> PortalSession:
        """Log in; raises AuthError when the portal rejects the credentials."""

    @abstractmethod
    def is_authenticated(self, session: PortalSession) -> bool:
        """False once the portal has logged the session out."""

    @abstractmethod
    def submit_shipment(self, session: PortalSession, fields: ShipmentFields) -> TrackingId:
        """Book one shipment.

        Raises SubmissionError (including SessionExpired and timeouts) or
        IndeterminateBooking when the booking went through but no tracking
        id could be read back.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the portal handle."""

    def __enter__(self) -> CourierPortal:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Field mapping
# ---------------------------------------------------------------------------

CONSTANT_PREFIX = "const:"


@dataclass(frozen=True)
class FieldMapping:
    """Versioned table of portal field id -> value source.

    A source is either an attribute path rooted at ``order`` or ``sender``
    (``order.address.city``, ``sender.name``) or a ``const:`` literal.
    ``defaults`` supply values for order attributes that came back empty.
    """

    version: str
    fields: dict[str, str]
    defaults: dict[str, str] = field(default_factory=dict)
    required: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not self.version:
            raise ValidationError("Field mapping needs a version")
        for field_id, source in self.fields.items():
            if source.startswith(CONSTANT_PREFIX):
                continue
            root = source.split(".", 1)[0]
            if root not in ("order", "sender"):
                raise ValidationError(
                    f"Field '{field_id}' maps from unknown source '{source}'"
                )
        unknown = self.required - set(self.fields)
        if unknown:
            raise ValidationError(
                f"Required fields missing from mapping: {', '.join(sorted(unknown))}"
            )


class ShipmentFieldMapper:
    """Maps an order plus the shop's sender profile to portal form values."""

    def __init__(self, mapping: FieldMapping, sender: SenderProfile) -> None:
        self._mapping = mapping
        self._sender = sender

    def map(self, order: Order) -> ShipmentFields:
        values: dict[str, str] = {}
        for field_id, source in self._mapping.fields.items():
            value = self._resolve(order, source)
            if not value:
                value = self._mapping.defaults.get(field_id, "")
            if not value and field_id in self._mapping.required:
                raise ValidationError(
                    f"Order {order.id} has no value for required field '{field_id}'"
                )
            values[field_id] = value
        return ShipmentFields(values=values, mapping_version=self._mapping.version)

    def _resolve(self, order: Order, source: str) -> str:
        if source.startswith(CONSTANT_PREFIX):
            return source[len(CONSTANT_PREFIX):]
        root_name, _, path = source.partition(".")
        current: object = order if root_name == "order" else self._sender
        for attr in path.split("."):
            if not hasattr(current, attr):
                raise ValidationError(f"Unknown attribute '{attr}' in source '{source}'")
            current = getattr(current, attr)
        if current is None:
            return ""
        # Enums and value objects (Quantity) render through their value
        current = getattr(current, "value", current)
        return str(current).strip()
