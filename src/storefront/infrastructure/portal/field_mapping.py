"""Booking form field mapping tables.

The default table targets the J&T Express PH booking form.  A different
portal revision is handled by shipping a new JSON table and pointing
``STOREFRONT_FIELD_MAPPING`` at it, not by changing code.

JSON layout::

    {
      "version": "jnt-ph-v2",
      "fields": {"receiverName": "order.customer.name", "weight": "const:1"},
      "defaults": {"packageSize": "Small"},
      "required": ["receiverName"]
    }
"""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import ConfigurationError, ValidationError
from storefront.domain.service.courier_portal import FieldMapping

DEFAULT_FIELD_MAPPING = FieldMapping(
    version="jnt-ph-v1",
    fields={
        # Sender (shop)
        "senderName": "sender.name",
        "senderContact": "sender.contact",
        "senderAddress": "sender.address",
        "senderProvince": "sender.province",
        "senderCity": "sender.city",
        "senderBarangay": "sender.barangay",
        # Receiver (customer)
        "receiverName": "order.customer.name",
        "receiverContact": "order.customer.phone",
        "receiverAddress": "order.address.details",
        "receiverProvince": "order.address.province",
        "receiverCity": "order.address.city",
        "receiverDistrict": "order.address.district",
        "receiverBarangay": "order.address.barangay",
        # Package
        "packageSize": "order.package_size",
        "itemCategory": "order.item_category",
        "weight": "const:1",
        "quantity": "order.quantity",
        "paymentType": "const:Prepaid",
        "reference": "order.id",
    },
    defaults={
        "packageSize": "Small",
        "itemCategory": "Electronics",
    },
    required=frozenset(
        {
            "senderName",
            "senderContact",
            "receiverName",
            "receiverContact",
            "receiverAddress",
            "receiverProvince",
            "receiverCity",
            "receiverBarangay",
            "quantity",
        }
    ),
)


def load_field_mapping(path: Path | None) -> FieldMapping:
    """Load a mapping table from *path*, or return the default table."""
    if path is None:
        return DEFAULT_FIELD_MAPPING
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return FieldMapping(
            version=raw["version"],
            fields=dict(raw["fields"]),
            defaults=dict(raw.get("defaults", {})),
            required=frozenset(raw.get("required", [])),
        )
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid field mapping file {path}: {exc}") from exc
