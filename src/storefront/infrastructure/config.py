"""Settings read from the environment.

Nothing else in the codebase reads ``os.environ``; the composition root
builds one ``Settings`` and passes values down.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from storefront.domain.exceptions import ConfigurationError
from storefront.domain.model.booking import PortalCredentials, SenderProfile

DEFAULT_PORTAL_URL = "https://www.jtexpress.ph"
DEFAULT_MAYA_CHECKOUT_URL = "https://payment-app-sandbox.mayadigital.io/v1/checkout"
DEFAULT_GCASH_QR = "/qrph.png"


@dataclass(frozen=True)
class Settings:
    store_url: str = ""
    data_dir: Path = Path("data")
    admin_token: str = field(default="", repr=False)
    storefront_url: str = ""

    portal_url: str = DEFAULT_PORTAL_URL
    portal_username: str = ""
    portal_password: str = field(default="", repr=False)
    portal_timeout: float = 30.0
    field_mapping_path: Path | None = None

    sender: SenderProfile = field(
        default_factory=lambda: SenderProfile(
            name="Your Shop",
            contact="+639123456789",
            address="Your Shop Address",
            province="Metro Manila",
            city="Manila",
            barangay="Your Barangay",
        )
    )

    maya_checkout_url: str = DEFAULT_MAYA_CHECKOUT_URL
    maya_public_key: str = ""
    gcash_qr_reference: str = DEFAULT_GCASH_QR

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env
        try:
            timeout = float(env.get("JNT_TIMEOUT", "30"))
        except ValueError:
            raise ConfigurationError(
                f"JNT_TIMEOUT must be a number of seconds, got {env['JNT_TIMEOUT']!r}"
            ) from None
        mapping_path = env.get("STOREFRONT_FIELD_MAPPING")
        return Settings(
            store_url=env.get("APPS_SCRIPT_URL", ""),
            data_dir=Path(env.get("STOREFRONT_DATA_DIR", "data")),
            admin_token=env.get("ADMIN_TOKEN", ""),
            storefront_url=env.get("STOREFRONT_URL", ""),
            portal_url=env.get("JNT_BASE_URL", DEFAULT_PORTAL_URL),
            portal_username=env.get("JNT_USERNAME", ""),
            portal_password=env.get("JNT_PASSWORD", ""),
            portal_timeout=timeout,
            field_mapping_path=Path(mapping_path) if mapping_path else None,
            sender=SenderProfile(
                name=env.get("SHOP_NAME", "Your Shop"),
                contact=env.get("SHOP_CONTACT", "+639123456789"),
                address=env.get("SHOP_ADDRESS", "Your Shop Address"),
                province=env.get("SHOP_PROVINCE", "Metro Manila"),
                city=env.get("SHOP_CITY", "Manila"),
                barangay=env.get("SHOP_BARANGAY", "Your Barangay"),
            ),
            maya_checkout_url=env.get("MAYA_CHECKOUT_URL", DEFAULT_MAYA_CHECKOUT_URL),
            maya_public_key=env.get("MAYA_PUBLIC_KEY", ""),
            gcash_qr_reference=env.get("GCASH_QR_REFERENCE", DEFAULT_GCASH_QR),
        )

    def require_portal_credentials(self) -> PortalCredentials:
        if not self.portal_username or not self.portal_password:
            raise ConfigurationError("JNT_USERNAME and JNT_PASSWORD must be set to book shipments")
        return PortalCredentials(self.portal_username, self.portal_password)

    def require_admin_token(self) -> str:
        if not self.admin_token:
            raise ConfigurationError("ADMIN_TOKEN must be set for admin actions")
        return self.admin_token
