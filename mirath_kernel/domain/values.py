"""
Values -- Estate input and normalized estate value objects.

Responsibility:
    ``Estate`` is the caller-owned input as supplied (amounts may be any
    numeric-ish value).  ``NormalizedEstate`` is the validated, clipped,
    Decimal-only form every later stage reads.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced (NormalizedEstate):
    - all amounts are Decimal quantized to the currency's minor unit
    - funeral <= total; debts <= total - funeral
    - will <= (total - funeral - debts) / 3
    - net_estate == total - funeral - debts - will > 0
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from mirath_kernel.domain.currency import CurrencyRegistry


@dataclass(frozen=True)
class Estate:
    """
    Estate as supplied by the caller.

    Contract:
        Holds the raw values; no validation happens here so that every
        problem can be reported together by normalization.
    """

    total: Any
    funeral: Any = 0
    debts: Any = 0
    will: Any = 0
    currency: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedEstate:
    """
    Validated estate with deductions applied.

    Guarantees:
        - Immutable and hashable
        - All amounts are Decimal in ``currency`` precision
    """

    total: Decimal
    funeral: Decimal
    debts: Decimal
    will: Decimal
    currency: str

    @property
    def net_estate(self) -> Decimal:
        return self.total - self.funeral - self.debts - self.will

    @property
    def minor_unit(self) -> Decimal:
        return CurrencyRegistry.get_minor_unit(self.currency)

    def to_dict(self) -> dict[str, str]:
        return {
            "total": str(self.total),
            "funeral": str(self.funeral),
            "debts": str(self.debts),
            "will": str(self.will),
            "currency": self.currency,
        }
