"""Application service: Booking Dispatcher.

Turns a selection of orders into courier bookings, one order at a time.

- The initial fetch is all-or-nothing: if the Order Store cannot produce
  the orders, the run aborts with FetchError before touching the portal.
- After that, every order is isolated.  Any failure, including an
  unexpected adapter error, is recorded against that order and the run
  moves on.
- Only a Confirmed booking writes ShippingStatus=Shipped to the Store.
- One portal handle per run, closed on every exit path.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from storefront.domain.exceptions import (
    AuthError,
    FetchError,
    IndeterminateBooking,
    SessionExpired,
    StoreError,
    SubmissionError,
    ValidationError,
)
from storefront.domain.model.booking import (
    BookingAttempt,
    BookingResult,
    BookingStage,
    DispatchSummary,
    OrderSelector,
    PortalCredentials,
    SummaryBuilder,
)
from storefront.domain.model.order import Order, ShippingStatus
from storefront.domain.repository.order_store import (
    OrderFilter,
    OrderStore,
    StatusUpdate,
)
from storefront.domain.service.courier_portal import (
    CourierPortal,
    PortalSession,
    ShipmentFieldMapper,
)

logger = structlog.get_logger(__name__)

AUTH_FAILED = "auth failed"


@dataclass
class _RunState:
    """Per-run mutable state; never outlives one ``dispatch`` call."""

    portal: CourierPortal
    session: PortalSession | None = None


def _describe(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}"


class BookingDispatcher:

    def __init__(
        self,
        store: OrderStore,
        portal_factory: Callable[[], CourierPortal],
        credentials: PortalCredentials,
        mapper: ShipmentFieldMapper,
        admin_token: str,
    ) -> None:
        self._store = store
        self._portal_factory = portal_factory
        self._credentials = credentials
        self._mapper = mapper
        self._admin_token = admin_token

    def dispatch(self, selector: OrderSelector) -> DispatchSummary:
        orders = self._resolve(selector)
        logger.info("Dispatch started", orders=len(orders))

        builder = SummaryBuilder()
        if orders:
            with self._portal_factory() as portal:
                state = _RunState(portal=portal)
                seen: set[str] = set()
                for order in orders:
                    builder.add(self._book(state, order, seen))

        summary = builder.build()
        logger.info(
            "Dispatch finished",
            attempted=summary.total,
            confirmed=len(summary.succeeded),
            failed=len(summary.failed),
            indeterminate=len(summary.indeterminate),
        )
        self._report(summary)
        return summary

    # --- Selection ------------------------------------------------------------

    def _resolve(self, selector: OrderSelector) -> list[Order]:
        try:
            if selector.all_ready_to_ship:
                return self._store.list_orders(
                    OrderFilter(shipping_status=ShippingStatus.READY_TO_SHIP)
                )
            return [self._store.get_order(order_id) for order_id in selector.order_ids]
        except StoreError as exc:
            raise FetchError(f"Could not load orders for dispatch: {exc}") from exc

    # --- One order ------------------------------------------------------------

    def _book(self, state: _RunState, order: Order, seen: set[str]) -> BookingResult:
        order_id = order.id or ""
        attempt = BookingAttempt(order_id)

        guard = self._guard(order, seen)
        seen.add(order_id)
        if guard:
            attempt.advance(BookingStage.FAILED)
            logger.warning("Booking skipped", order_id=order_id, reason=guard)
            return BookingResult.failed(order_id, guard)

        try:
            attempt.advance(BookingStage.AUTHENTICATING)
            session = self._ensure_session(state, attempt)

            attempt.advance(BookingStage.FORM_FILLING)
            fields = self._mapper.map(order)

            attempt.advance(BookingStage.SUBMITTING)
            tracking = state.portal.submit_shipment(session, fields)
        except AuthError as exc:
            attempt.advance(BookingStage.FAILED)
            logger.warning("Booking failed: login rejected", order_id=order_id, error=str(exc))
            return BookingResult.failed(order_id, AUTH_FAILED)
        except SessionExpired as exc:
            # The next order logs in again.
            state.session = None
            attempt.advance(BookingStage.FAILED)
            logger.warning("Booking failed: session expired", order_id=order_id, error=str(exc))
            return BookingResult.failed(order_id, f"session expired: {exc}")
        except SubmissionError as exc:
            attempt.advance(BookingStage.FAILED)
            logger.warning("Booking failed", order_id=order_id, error=str(exc))
            return BookingResult.failed(order_id, f"submission failed: {exc}")
        except ValidationError as exc:
            attempt.advance(BookingStage.FAILED)
            logger.warning("Booking failed: invalid fields", order_id=order_id, error=str(exc))
            return BookingResult.failed(order_id, f"invalid shipment fields: {exc}")
        except IndeterminateBooking as exc:
            attempt.advance(BookingStage.INDETERMINATE)
            logger.warning("Booking indeterminate", order_id=order_id, error=str(exc))
            return BookingResult.indeterminate(order_id, str(exc))
        except Exception as exc:
            logger.exception("Booking crashed", order_id=order_id, stage=attempt.stage.value)
            # Once the form went out the booking may exist on the portal.
            if attempt.stage == BookingStage.SUBMITTING:
                attempt.advance(BookingStage.INDETERMINATE)
                return BookingResult.indeterminate(
                    order_id, f"unexpected error during submission: {_describe(exc)}"
                )
            attempt.advance(BookingStage.FAILED)
            return BookingResult.failed(order_id, f"unexpected error: {_describe(exc)}")

        try:
            self._store.update_order_status(
                order_id, StatusUpdate.shipped(tracking.value), self._admin_token
            )
        except Exception as exc:
            attempt.advance(BookingStage.INDETERMINATE)
            logger.exception(
                "Booked but the Order Store update failed",
                order_id=order_id,
                tracking=tracking.value,
            )
            return BookingResult.indeterminate(
                order_id,
                f"booked as {tracking} but order status update failed: {exc}",
            )

        attempt.advance(BookingStage.CONFIRMED)
        logger.info("Booked", order_id=order_id, tracking=tracking.value)
        return BookingResult.confirmed(order_id, tracking.value)

    @staticmethod
    def _guard(order: Order, seen: set[str]) -> str | None:
        """Reason this order must not be submitted, or None if it may."""
        if order.id in seen:
            return "already dispatched in this run"
        if order.shipping_status == ShippingStatus.SHIPPED:
            return f"already shipped (tracking {order.tracking_number or 'unknown'})"
        if not order.is_bookable:
            return f"not ready to ship (status={order.shipping_status.value})"
        return None

    def _ensure_session(self, state: _RunState, attempt: BookingAttempt) -> PortalSession:
        if state.session is not None and state.portal.is_authenticated(state.session):
            return state.session

        state.session = None
        while True:
            try:
                state.session = state.portal.authenticate(self._credentials)
                return state.session
            except AuthError:
                if not attempt.can_reauthenticate:
                    raise
                logger.info("Login rejected, retrying once", order_id=attempt.order_id)
                attempt.advance(BookingStage.AUTHENTICATING)

    # --- Reporting ------------------------------------------------------------

    def _report(self, summary: DispatchSummary) -> None:
        try:
            self._store.record_batch_result(summary)
        except Exception:
            # Per-order status writes already happened; the audit record is
            # best effort.
            logger.exception("Could not record dispatch summary", total=summary.total)
