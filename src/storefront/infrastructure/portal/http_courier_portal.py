"""HTTP implementation of the courier portal.

Drives the portal's own form endpoints with a cookie-holding
``httpx.Client`` instead of a browser.  Field values arrive already
mapped; this module only knows URLs, status codes and where the portal
puts the tracking number.
"""

from __future__ import annotations

import re

import httpx
import structlog

from storefront.domain.exceptions import (
    AuthError,
    IndeterminateBooking,
    SessionExpired,
    SubmissionError,
)
from storefront.domain.model.booking import PortalCredentials, ShipmentFields, TrackingId
from storefront.domain.service.courier_portal import CourierPortal, PortalSession

logger = structlog.get_logger(__name__)

LOGIN_PATH = "/login"
BOOKING_PATH = "/booking/create"
SESSION_PATH = "/account/session"

TRACKING_KEYS = ("trackingNumber", "tracking_number", "waybillNo")
_TRACKING_IN_URL = re.compile(r"tracking[=/](\w+)", re.IGNORECASE)


class HttpCourierPortal(CourierPortal):

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    # --- CourierPortal interface ----------------------------------------------

    def authenticate(self, credentials: PortalCredentials) -> PortalSession:
        logger.debug("Portal login", username=credentials.username)
        try:
            response = self._client.post(
                LOGIN_PATH,
                data={"username": credentials.username, "password": credentials.password},
            )
        except httpx.HTTPError as exc:
            raise AuthError(f"login request failed: {exc}") from exc

        if response.status_code in (401, 403) or self._on_login_page(response):
            raise AuthError("login rejected, check credentials")
        if response.status_code >= 400:
            raise AuthError(f"login failed with HTTP {response.status_code}")

        token = response.cookies.get("session") or self._client.cookies.get("session") or ""
        return PortalSession(username=credentials.username, token=token)

    def is_authenticated(self, session: PortalSession) -> bool:
        if not session.active:
            return False
        try:
            response = self._client.get(SESSION_PATH)
        except httpx.HTTPError:
            return False
        if response.status_code != 200 or self._on_login_page(response):
            session.active = False
        return session.active

    def submit_shipment(self, session: PortalSession, fields: ShipmentFields) -> TrackingId:
        logger.debug(
            "Submitting booking",
            mapping_version=fields.mapping_version,
            fields=len(fields.values),
        )
        try:
            response = self._client.post(BOOKING_PATH, data=fields.values)
        except httpx.TimeoutException as exc:
            raise SubmissionError(f"portal timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise SubmissionError(f"portal request failed: {exc}") from exc

        if response.status_code == 401 or self._on_login_page(response):
            session.active = False
            raise SessionExpired("portal session logged out")
        if response.status_code >= 400:
            raise SubmissionError(
                f"portal rejected booking (HTTP {response.status_code}): "
                f"{self._error_message(response)}"
            )

        tracking = self._extract_tracking(response)
        if tracking is None:
            raise IndeterminateBooking(
                "booking submitted but the confirmation shows no tracking number"
            )
        return TrackingId(tracking)

    def close(self) -> None:
        self._client.close()

    # --- Response parsing -----------------------------------------------------

    @staticmethod
    def _on_login_page(response: httpx.Response) -> bool:
        return LOGIN_PATH in response.url.path

    @staticmethod
    def _extract_tracking(response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            payload = body.get("data") if isinstance(body.get("data"), dict) else body
            for key in TRACKING_KEYS:
                value = payload.get(key)
                if value and str(value).strip():
                    return str(value).strip()

        match = _TRACKING_IN_URL.search(str(response.url))
        if match:
            return match.group(1)
        return None

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body)
        return str(body)
