"""Tests for the HTTP courier portal against a mocked portal site."""

import httpx
import pytest

from storefront.domain.exceptions import (
    AuthError,
    IndeterminateBooking,
    SessionExpired,
    SubmissionError,
)
from storefront.domain.model.booking import ShipmentFields
from storefront.domain.service.courier_portal import PortalSession
from storefront.infrastructure.portal.http_courier_portal import HttpCourierPortal
from tests.fakes import CREDENTIALS

BASE = "https://portal.test"
FIELDS = ShipmentFields({"receiverName": "Juan Dela Cruz", "reference": "ORD-1"}, "jnt-ph-v1")


def _portal(handler) -> HttpCourierPortal:
    return HttpCourierPortal(BASE, transport=httpx.MockTransport(handler))


def _session() -> PortalSession:
    return PortalSession(username=CREDENTIALS.username, token="abc")


class TestAuthenticate:

    def test_login_redirects_to_dashboard(self):
        def handler(request):
            if request.url.path == "/login":
                return httpx.Response(
                    302,
                    headers={"location": "/dashboard", "set-cookie": "session=abc; Path=/"},
                )
            return httpx.Response(200, text="<html>Welcome</html>")

        session = _portal(handler).authenticate(CREDENTIALS)

        assert session.username == CREDENTIALS.username
        assert session.token == "abc"
        assert session.active

    def test_rejected_credentials(self):
        with pytest.raises(AuthError, match="rejected"):
            _portal(lambda request: httpx.Response(401)).authenticate(CREDENTIALS)

    def test_login_page_shown_again(self):
        def handler(request):
            return httpx.Response(200, text="<html>Invalid password</html>")

        with pytest.raises(AuthError):
            _portal(handler).authenticate(CREDENTIALS)

    def test_unreachable_portal(self):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        with pytest.raises(AuthError, match="login request failed"):
            _portal(handler).authenticate(CREDENTIALS)


class TestIsAuthenticated:

    def test_live_session(self):
        assert _portal(lambda request: httpx.Response(200, json={})).is_authenticated(_session())

    def test_logged_out_session(self):
        def handler(request):
            if request.url.path == "/account/session":
                return httpx.Response(302, headers={"location": "/login"})
            return httpx.Response(200, text="<html>Login</html>")

        session = _session()
        assert not _portal(handler).is_authenticated(session)
        assert not session.active


class TestSubmitShipment:

    def test_tracking_from_json(self):
        def handler(request):
            return httpx.Response(200, json={"data": {"waybillNo": "JT777"}})

        tracking = _portal(handler).submit_shipment(_session(), FIELDS)

        assert tracking.value == "JT777"

    def test_sends_mapped_fields_as_form(self):
        bodies = []

        def handler(request):
            bodies.append(request.content.decode())
            return httpx.Response(200, json={"trackingNumber": "JT1"})

        _portal(handler).submit_shipment(_session(), FIELDS)

        assert "receiverName=Juan+Dela+Cruz" in bodies[0]
        assert "reference=ORD-1" in bodies[0]

    def test_tracking_from_confirmation_url(self):
        def handler(request):
            if request.url.path == "/booking/create":
                return httpx.Response(302, headers={"location": "/booking/confirm?tracking=JT888"})
            return httpx.Response(200, text="<html>Booked</html>")

        assert _portal(handler).submit_shipment(_session(), FIELDS).value == "JT888"

    def test_no_tracking_is_indeterminate(self):
        def handler(request):
            return httpx.Response(200, text="<html>Thank you</html>")

        with pytest.raises(IndeterminateBooking):
            _portal(handler).submit_shipment(_session(), FIELDS)

    def test_redirect_to_login_expires_session(self):
        def handler(request):
            if request.url.path == "/booking/create":
                return httpx.Response(302, headers={"location": "/login"})
            return httpx.Response(200, text="<html>Login</html>")

        session = _session()
        with pytest.raises(SessionExpired):
            _portal(handler).submit_shipment(session, FIELDS)
        assert not session.active

    def test_rejected_form(self):
        def handler(request):
            return httpx.Response(422, json={"message": "invalid barangay"})

        with pytest.raises(SubmissionError, match="invalid barangay"):
            _portal(handler).submit_shipment(_session(), FIELDS)

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        with pytest.raises(SubmissionError, match="portal timed out"):
            _portal(handler).submit_shipment(_session(), FIELDS)
