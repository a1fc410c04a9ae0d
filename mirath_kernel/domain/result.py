"""
Result -- Immutable outcome of one distribution run.

Responsibility:
    Aggregates everything a caller (presentation, persistence, report
    generation) consumes: flags, share lines, special cases, the blocked
    heir log, warnings, errors, the step trace and the confidence score.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - A failure result carries no share lines
    - ``to_dict`` output is JSON-safe and deterministic
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from mirath_kernel.domain.heirs import HeirKey
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.share import ShareLine
from mirath_kernel.domain.values import NormalizedEstate


class StepLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class SpecialCaseType(str, Enum):
    """Named configurations the engine detects and reports."""

    MUSHARRAKA = "musharraka"
    AKDARIYYA = "akdariyya"
    UMARIYYAH = "umariyyah"
    GRANDFATHER_WITH_SIBLINGS = "grandfather_with_siblings"
    SISTER_WITH_DAUGHTERS = "sister_with_daughters"
    PATERNAL_SISTER_WITH_DAUGHTERS = "paternal_sister_with_daughters"
    AWL = "awl"
    RADD = "radd"
    BLOOD_RELATIVES = "blood_relatives"


@dataclass(frozen=True)
class CalculationStep:
    title: str
    description: str
    level: StepLevel = StepLevel.INFO

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "description": self.description, "level": self.level.value}


@dataclass(frozen=True)
class SpecialCase:
    type: SpecialCaseType
    name: str
    description: str
    reference: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type.value,
            "name": self.name,
            "description": self.description,
            "reference": self.reference,
        }


@dataclass(frozen=True)
class BlockedHeir:
    """One entry of the blocked-heir (hijab) log."""

    heir: HeirKey
    blocked_by: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"heir": self.heir.value, "blocked_by": self.blocked_by, "reason": self.reason}


@dataclass(frozen=True)
class DistributionResult:
    """
    Immutable snapshot returned by DistributionEngine.calculate.

    Contract:
        ``success`` is False exactly when ``errors`` explain why no
        distribution was produced.  Elapsed time is deliberately absent;
        identical inputs produce equal results.
    """

    success: bool
    madhab: str
    madhab_name: str
    estate: NormalizedEstate | None = None
    net_estate: Decimal = Decimal("0")
    asl: int = 0
    final_base: int = 0
    corrected_base: int = 0
    awl_applied: bool = False
    awl_ratio: Rational | None = None
    radd_applied: bool = False
    blood_relatives_applied: bool = False
    shares: tuple[ShareLine, ...] = ()
    special_cases: tuple[SpecialCase, ...] = ()
    blocked: tuple[BlockedHeir, ...] = ()
    notes: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    steps: tuple[CalculationStep, ...] = ()
    confidence: Decimal = Decimal("0")
    error_code: str | None = None

    @classmethod
    def failure(
        cls,
        *,
        madhab: str,
        madhab_name: str,
        errors: tuple[str, ...] | list[str],
        warnings: tuple[str, ...] | list[str] = (),
        steps: tuple[CalculationStep, ...] | list[CalculationStep] = (),
        notes: tuple[str, ...] | list[str] = (),
        error_code: str | None = None,
    ) -> DistributionResult:
        return cls(
            success=False,
            madhab=madhab,
            madhab_name=madhab_name,
            notes=tuple(notes),
            warnings=tuple(warnings),
            errors=tuple(errors),
            steps=tuple(steps),
            error_code=error_code,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def share(self, key: HeirKey | str) -> ShareLine | None:
        """The share line for ``key``, or None if that category holds no share."""
        wanted = HeirKey(key)
        for line in self.shares:
            if line.heir_key == wanted:
                return line
        return None

    def fraction_of(self, key: HeirKey | str) -> Rational:
        line = self.share(key)
        return line.fraction if line is not None else Rational.ZERO

    @property
    def fraction_sum(self) -> Rational:
        total = Rational.ZERO
        for line in self.shares:
            total = total + line.fraction
        return total

    @property
    def amount_sum(self) -> Decimal:
        return sum((line.amount for line in self.shares), Decimal("0"))

    def has_special_case(self, case_type: SpecialCaseType | str) -> bool:
        wanted = SpecialCaseType(case_type)
        return any(case.type == wanted for case in self.special_cases)

    def is_blocked(self, key: HeirKey | str) -> bool:
        wanted = HeirKey(key)
        return any(entry.heir == wanted for entry in self.blocked)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "madhab": self.madhab,
            "madhab_name": self.madhab_name,
            "estate": self.estate.to_dict() if self.estate is not None else None,
            "net_estate": str(self.net_estate),
            "asl": self.asl,
            "final_base": self.final_base,
            "corrected_base": self.corrected_base,
            "awl_applied": self.awl_applied,
            "awl_ratio": str(self.awl_ratio) if self.awl_ratio is not None else None,
            "radd_applied": self.radd_applied,
            "blood_relatives_applied": self.blood_relatives_applied,
            "shares": [line.to_dict() for line in self.shares],
            "special_cases": [case.to_dict() for case in self.special_cases],
            "blocked": [entry.to_dict() for entry in self.blocked],
            "notes": list(self.notes),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "steps": [step.to_dict() for step in self.steps],
            "confidence": str(self.confidence),
            "error_code": self.error_code,
        }
