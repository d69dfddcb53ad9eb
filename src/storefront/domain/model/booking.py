"""Courier booking types: per-order attempt state and the dispatch summary.

A dispatch run walks every selected order through

    Selected -> Authenticating -> FormFilling -> Submitting
             -> {Confirmed | Failed | Indeterminate}

Stages only move forward.  Authenticating may loop on itself once (a single
re-authentication) before the attempt fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError


class BookingStage(Enum):
    SELECTED = "Selected"
    AUTHENTICATING = "Authenticating"
    FORM_FILLING = "FormFilling"
    SUBMITTING = "Submitting"
    CONFIRMED = "Confirmed"
    FAILED = "Failed"
    INDETERMINATE = "Indeterminate"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STAGES


_TERMINAL_STAGES = frozenset(
    {BookingStage.CONFIRMED, BookingStage.FAILED, BookingStage.INDETERMINATE}
)

_ORDER = [
    BookingStage.SELECTED,
    BookingStage.AUTHENTICATING,
    BookingStage.FORM_FILLING,
    BookingStage.SUBMITTING,
]

MAX_REAUTHENTICATIONS = 1


class BookingOutcome(Enum):
    CONFIRMED = "Confirmed"
    FAILED = "Failed"
    INDETERMINATE = "Indeterminate"


@dataclass
class BookingAttempt:
    """Tracks one order's progress through a dispatch run.

    Invariants:
    - stages never move backward
    - a terminal stage is final
    - Authenticating is re-entered at most ``MAX_REAUTHENTICATIONS`` times
    """

    order_id: str
    stage: BookingStage = BookingStage.SELECTED
    reauthentications: int = 0

    def advance(self, target: BookingStage) -> None:
        if self.stage.is_terminal:
            raise ValidationError(
                f"Booking for {self.order_id} already finished as {self.stage.value}"
            )
        if target.is_terminal:
            self.stage = target
            return
        if target == self.stage == BookingStage.AUTHENTICATING:
            if not self.can_reauthenticate:
                raise ValidationError(
                    f"Booking for {self.order_id} already re-authenticated"
                )
            self.reauthentications += 1
            self.stage = target
            return
        if _ORDER.index(target) <= _ORDER.index(self.stage):
            raise ValidationError(
                f"Cannot move booking for {self.order_id} from "
                f"{self.stage.value} back to {target.value}"
            )
        self.stage = target

    @property
    def can_reauthenticate(self) -> bool:
        return self.reauthentications < MAX_REAUTHENTICATIONS


@dataclass(frozen=True)
class BookingResult:
    """Terminal result for one order in a dispatch run."""

    order_id: str
    outcome: BookingOutcome
    tracking_number: str | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.outcome == BookingOutcome.CONFIRMED and not self.tracking_number:
            raise ValidationError(
                f"Confirmed booking for {self.order_id} needs a tracking number"
            )
        if self.outcome != BookingOutcome.CONFIRMED and not self.reason:
            raise ValidationError(
                f"{self.outcome.value} booking for {self.order_id} needs a reason"
            )

    @staticmethod
    def confirmed(order_id: str, tracking_number: str) -> BookingResult:
        return BookingResult(order_id, BookingOutcome.CONFIRMED, tracking_number=tracking_number)

    @staticmethod
    def failed(order_id: str, reason: str) -> BookingResult:
        return BookingResult(order_id, BookingOutcome.FAILED, reason=reason)

    @staticmethod
    def indeterminate(order_id: str, reason: str) -> BookingResult:
        return BookingResult(order_id, BookingOutcome.INDETERMINATE, reason=reason)


@dataclass(frozen=True)
class DispatchSummary:
    """Everything one dispatch run did, in input order."""

    results: tuple[BookingResult, ...]
    started_at: datetime
    finished_at: datetime

    @property
    def total(self) -> int:
        return len(self.results)

    # Pairs, not dicts: one order id can appear more than once in a run.
    @property
    def succeeded(self) -> list[tuple[str, str]]:
        return [
            (r.order_id, r.tracking_number)  # type: ignore[misc]
            for r in self.results
            if r.outcome == BookingOutcome.CONFIRMED
        ]

    @property
    def failed(self) -> list[tuple[str, str]]:
        return self._reasons(BookingOutcome.FAILED)

    @property
    def indeterminate(self) -> list[tuple[str, str]]:
        return self._reasons(BookingOutcome.INDETERMINATE)

    def _reasons(self, outcome: BookingOutcome) -> list[tuple[str, str]]:
        return [
            (r.order_id, r.reason)  # type: ignore[misc]
            for r in self.results
            if r.outcome == outcome
        ]

    def to_payload(self) -> dict:
        """Batch callback record sent to the Order Store for audit."""
        return {
            "total": self.total,
            "success": [
                {"orderId": k, "trackingNumber": v} for k, v in self.succeeded
            ],
            "failed": [{"orderId": k, "error": v} for k, v in self.failed],
            "indeterminate": [
                {"orderId": k, "error": v} for k, v in self.indeterminate
            ],
            "startedAt": self.started_at.isoformat(),
            "finishedAt": self.finished_at.isoformat(),
        }


@dataclass
class SummaryBuilder:
    """Collects results during one run; produces an immutable summary."""

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _results: list[BookingResult] = field(default_factory=list)

    def add(self, result: BookingResult) -> None:
        self._results.append(result)

    def build(self) -> DispatchSummary:
        return DispatchSummary(
            results=tuple(self._results),
            started_at=self.started_at,
            finished_at=datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class OrderSelector:
    """Which orders a dispatch run should book."""

    order_ids: tuple[str, ...] = ()
    all_ready_to_ship: bool = False

    def __post_init__(self) -> None:
        if self.all_ready_to_ship and self.order_ids:
            raise ValidationError("Select either explicit order ids or all ready-to-ship orders")
        if not self.all_ready_to_ship and not self.order_ids:
            raise ValidationError("No orders selected for dispatch")

    @staticmethod
    def single(order_id: str) -> OrderSelector:
        return OrderSelector(order_ids=(order_id,))

    @staticmethod
    def many(order_ids: list[str]) -> OrderSelector:
        return OrderSelector(order_ids=tuple(order_ids))

    @staticmethod
    def ready_to_ship() -> OrderSelector:
        return OrderSelector(all_ready_to_ship=True)


@dataclass(frozen=True)
class SenderProfile:
    """The shop's sender identity, shared read-only by every booking."""

    name: str
    contact: str
    address: str
    province: str
    city: str
    barangay: str


@dataclass(frozen=True)
class PortalCredentials:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ShipmentFields:
    """Structured booking form values keyed by portal field id."""

    values: dict[str, str]
    mapping_version: str

    def __getitem__(self, field_id: str) -> str:
        return self.values[field_id]


@dataclass(frozen=True)
class TrackingId:
    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValidationError("Tracking id cannot be empty")

    def __str__(self) -> str:
        return self.value
