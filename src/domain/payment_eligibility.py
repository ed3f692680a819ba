"""Payment Eligibility

Derives a subject's trial/active/expired status from successful payment
history. Plan kinds and their validity windows are data, so a new plan kind
is a configuration change rather than a new branch.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from src.domain.eligibility_clock import elapsed_days


class PlanKind(str, Enum):
    """Payment plan kinds as seen by the eligibility evaluator"""
    MONTHLY = "monthly"
    YEARLY = "yearly"
    OTHER = "other"


class EligibilityReason(str, Enum):
    """Why a subject is (or is not) eligible"""
    TRIAL = "Trial"
    PAID_MONTHLY = "PaidMonthly"
    PAID_YEARLY = "PaidYearly"
    EXPIRED = "Expired"


@dataclass(frozen=True)
class EligibilityWindow:
    """How long a successful payment of one plan kind keeps a subject active"""

    plan_kind: PlanKind
    validity_days: int
    reason: EligibilityReason

    def __post_init__(self) -> None:
        if self.validity_days < 0:
            raise ValueError("validity_days cannot be negative")


@dataclass(frozen=True)
class PaymentRecord:
    """Read-only view of one payment made for a subject"""

    subject_id: str
    occurred_at: date
    succeeded: bool
    plan_kind: PlanKind
    payment_id: Optional[str] = None


@dataclass(frozen=True)
class EligibilityStatus:
    """Derived eligibility; recomputed on every query"""

    eligible: bool
    reason: EligibilityReason
    last_payment_date: Optional[date] = None
    plan_kind: Optional[PlanKind] = None


def default_windows(monthly_days: int = 35, yearly_days: int = 370) -> tuple[EligibilityWindow, ...]:
    return (
        EligibilityWindow(PlanKind.MONTHLY, monthly_days, EligibilityReason.PAID_MONTHLY),
        EligibilityWindow(PlanKind.YEARLY, yearly_days, EligibilityReason.PAID_YEARLY),
    )


class PaymentEligibilityEvaluator:
    """
    Pure evaluator over a payment history snapshot

    Rules:
    - Only succeeded payments whose plan kind has a window qualify
    - No qualifying payment -> eligible, reason Trial
    - Most recent qualifying payment within its window (inclusive) -> Paid*
    - Otherwise -> not eligible, reason Expired, with the stale payment date
    """

    def __init__(self, windows: Iterable[EligibilityWindow]):
        self._windows = {window.plan_kind: window for window in windows}

    @property
    def qualifying_plan_kinds(self) -> frozenset[PlanKind]:
        return frozenset(self._windows)

    def evaluate(self, payments: Iterable[PaymentRecord], today: date) -> EligibilityStatus:
        qualifying = [
            payment
            for payment in payments
            if payment.succeeded and payment.plan_kind in self._windows
        ]
        if not qualifying:
            return EligibilityStatus(eligible=True, reason=EligibilityReason.TRIAL)

        # input is usually ordered most recent first; max() keeps this exact either way
        last_payment = max(qualifying, key=lambda payment: payment.occurred_at)
        window = self._windows[last_payment.plan_kind]

        if elapsed_days(last_payment.occurred_at, today) <= window.validity_days:
            return EligibilityStatus(
                eligible=True,
                reason=window.reason,
                last_payment_date=last_payment.occurred_at,
                plan_kind=last_payment.plan_kind,
            )

        return EligibilityStatus(
            eligible=False,
            reason=EligibilityReason.EXPIRED,
            last_payment_date=last_payment.occurred_at,
            plan_kind=last_payment.plan_kind,
        )
