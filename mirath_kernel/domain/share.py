"""
Share -- One heir's entitlement line.

Responsibility:
    ``ShareRecord`` is the mutable working line owned by a single
    distribution run: later pipeline stages layer additional entitlement
    onto the same heir (a fixed sixth plus a residuary top-up, a return of
    surplus).  ``ShareLine`` is the frozen snapshot handed back to callers.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - amount / amount_per_person are None until ``compute_amount`` runs
    - multiplicity >= 1
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from mirath_kernel.domain.heirs import HeirKey
from mirath_kernel.domain.rational import Rational


class ShareClassification(str, Enum):
    """How an heir came by its share."""

    FIXED = "fixed"  # fard
    RESIDUARY = "residuary"  # 'asaba
    FIXED_RESIDUARY = "fixed+residuary"
    RETURN = "return"  # radd
    BLOOD_RELATIVE = "blood-relative"  # dhawu al-arham
    TREASURY = "treasury"  # bayt al-mal


@dataclass
class ShareRecord:
    """Working entitlement line for one heir category within one calculation."""

    heir_key: HeirKey
    classification: ShareClassification
    multiplicity: int
    fraction: Rational
    reason: str = ""
    original_fraction: Rational | None = None
    base_shares: int = 0
    amount: Decimal | None = None
    amount_per_person: Decimal | None = None

    def __post_init__(self) -> None:
        if self.multiplicity < 1:
            raise ValueError(f"multiplicity must be >= 1 for {self.heir_key.value}")
        if self.original_fraction is None:
            self.original_fraction = self.fraction

    def set_fraction(self, fraction: Rational) -> None:
        self.fraction = fraction

    def add_fraction(self, fraction: Rational) -> None:
        self.fraction = self.fraction + fraction

    def compute_amount(self, net_estate: Decimal, minor_unit: Decimal) -> None:
        """amount = net_estate x fraction, rounded half-up to the currency's minor unit."""
        exact = net_estate * Decimal(self.fraction.numerator) / Decimal(self.fraction.denominator)
        self.amount = exact.quantize(minor_unit, rounding=ROUND_HALF_UP)
        self._refresh_per_person(minor_unit)

    def adjust_amount(self, delta: Decimal, minor_unit: Decimal) -> None:
        """Shift the monetary amount by ``delta`` during rounding reconciliation."""
        if self.amount is None:
            raise ValueError(f"amount not computed for {self.heir_key.value}")
        self.amount = self.amount + delta
        self._refresh_per_person(minor_unit)

    def _refresh_per_person(self, minor_unit: Decimal) -> None:
        assert self.amount is not None
        self.amount_per_person = (self.amount / self.multiplicity).quantize(
            minor_unit, rounding=ROUND_HALF_UP
        )

    def snapshot(self) -> ShareLine:
        return ShareLine(
            heir_key=self.heir_key,
            classification=self.classification,
            multiplicity=self.multiplicity,
            fraction=self.fraction,
            original_fraction=self.original_fraction or self.fraction,
            base_shares=self.base_shares,
            amount=self.amount if self.amount is not None else Decimal("0"),
            amount_per_person=(
                self.amount_per_person if self.amount_per_person is not None else Decimal("0")
            ),
            reason=self.reason,
        )


@dataclass(frozen=True)
class ShareLine:
    """
    Final, immutable share of one heir category.

    Guarantees:
        - ``fraction`` is the heir category's final share of the net estate
        - ``amount`` is reconciled so that all lines sum to the net estate
    """

    heir_key: HeirKey
    classification: ShareClassification
    multiplicity: int
    fraction: Rational
    original_fraction: Rational
    base_shares: int
    amount: Decimal
    amount_per_person: Decimal
    reason: str = ""

    @property
    def fraction_per_person(self) -> Rational:
        return self.fraction.per_person(self.multiplicity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.heir_key.value,
            "classification": self.classification.value,
            "count": self.multiplicity,
            "fraction": str(self.fraction),
            "fraction_arabic": self.fraction.to_arabic(),
            "percentage": self.fraction.to_percentage(),
            "original_fraction": str(self.original_fraction),
            "base_shares": self.base_shares,
            "amount": str(self.amount),
            "amount_per_person": str(self.amount_per_person),
            "reason": self.reason,
        }
