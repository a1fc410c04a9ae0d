"""
Module: mirath_engines.context
Responsibility:
    Working state of a single distribution run: the live heir counts that
    blocking zeroes, the share records later stages layer entitlement
    onto, and the audit trail (blocked-heir log, special cases, notes,
    warnings, steps).

Architecture position:
    Engines -- owned exclusively by one DistributionEngine.calculate
    invocation; never shared, never cached.

Invariants enforced:
    - A blocked heir's count is zero for every later stage
    - At most one share record per heir key
    - Predicates always read the live (post-blocking) counts; the
      pre-blocking snapshot is kept separately in ``initial``
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mirath_config.schema import MadhabRules, RuleBook
from mirath_kernel.domain.heirs import (
    DESCENDANTS,
    FULL_AND_PATERNAL_SIBLINGS,
    MATERNAL_SIBLINGS,
    HeirCounts,
    HeirKey,
)
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import (
    BlockedHeir,
    CalculationStep,
    SpecialCase,
    SpecialCaseType,
    StepLevel,
)
from mirath_kernel.domain.share import ShareClassification, ShareRecord
from mirath_kernel.domain.values import NormalizedEstate
from mirath_kernel.exceptions import DuplicateShareError


@dataclass
class DistributionContext:
    """Mutable state threaded through the pipeline stages."""

    book: RuleBook
    rules: MadhabRules
    estate: NormalizedEstate
    initial: HeirCounts
    counts: dict[HeirKey, int] = field(default_factory=dict)
    shares: dict[HeirKey, ShareRecord] = field(default_factory=dict)
    blocked: list[BlockedHeir] = field(default_factory=list)
    special_cases: list[SpecialCase] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    steps: list[CalculationStep] = field(default_factory=list)
    asl: int = 1
    final_base: int = 1
    awl_applied: bool = False
    awl_ratio: Rational | None = None
    radd_applied: bool = False
    blood_relatives_applied: bool = False
    residuary_assigned: bool = False
    umariyyah: bool = False

    @classmethod
    def start(
        cls,
        book: RuleBook,
        rules: MadhabRules,
        estate: NormalizedEstate,
        heirs: HeirCounts,
    ) -> DistributionContext:
        return cls(
            book=book,
            rules=rules,
            estate=estate,
            initial=heirs,
            counts={key: n for key, n in heirs.present()},
        )

    # ------------------------------------------------------------------
    # Live counts
    # ------------------------------------------------------------------

    def count(self, key: HeirKey) -> int:
        return self.counts.get(key, 0)

    def has(self, key: HeirKey) -> bool:
        return self.count(key) > 0

    def total(self, keys: tuple[HeirKey, ...] | list[HeirKey]) -> int:
        return sum(self.count(k) for k in keys)

    def present(self) -> list[HeirKey]:
        return [k for k, n in self.counts.items() if n > 0]

    @property
    def has_descendants(self) -> bool:
        return self.total(DESCENDANTS) > 0

    @property
    def has_male_descendants(self) -> bool:
        return self.has(HeirKey.SON) or self.has(HeirKey.GRANDSON)

    @property
    def has_female_descendants(self) -> bool:
        return self.has(HeirKey.DAUGHTER) or self.has(HeirKey.GRANDDAUGHTER)

    @property
    def has_male_ascendant(self) -> bool:
        return self.has(HeirKey.FATHER) or self.has(HeirKey.GRANDFATHER)

    @property
    def full_and_paternal_siblings(self) -> int:
        return self.total(FULL_AND_PATERNAL_SIBLINGS)

    @property
    def maternal_siblings(self) -> int:
        return self.total(MATERNAL_SIBLINGS)

    @property
    def all_siblings(self) -> int:
        return self.full_and_paternal_siblings + self.maternal_siblings

    # ------------------------------------------------------------------
    # Blocking
    # ------------------------------------------------------------------

    def block(self, heir: HeirKey, blocked_by: str, reason: str) -> bool:
        """Zero ``heir`` and log it; False if the heir was not present."""
        if not self.has(heir):
            return False
        self.counts[heir] = 0
        self.blocked.append(BlockedHeir(heir=heir, blocked_by=blocked_by, reason=reason))
        return True

    # ------------------------------------------------------------------
    # Shares
    # ------------------------------------------------------------------

    def add_share(
        self,
        key: HeirKey,
        classification: ShareClassification,
        multiplicity: int,
        fraction: Rational,
        reason: str = "",
    ) -> ShareRecord:
        if key in self.shares:
            raise DuplicateShareError(key.value)
        record = ShareRecord(
            heir_key=key,
            classification=classification,
            multiplicity=multiplicity,
            fraction=fraction,
            reason=reason,
        )
        self.shares[key] = record
        return record

    def remove_share(self, key: HeirKey) -> ShareRecord | None:
        return self.shares.pop(key, None)

    @property
    def allocated(self) -> Rational:
        total = Rational.ZERO
        for record in self.shares.values():
            total = total + record.fraction
        return total

    @property
    def remainder(self) -> Rational:
        return Rational.ONE - self.allocated

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------

    def add_step(self, title: str, description: str, level: StepLevel = StepLevel.INFO) -> None:
        self.steps.append(CalculationStep(title=title, description=description, level=level))

    def add_note(self, note: str) -> None:
        if note not in self.notes:
            self.notes.append(note)

    def add_special_case(self, case_type: SpecialCaseType, description: str | None = None) -> None:
        if any(case.type == case_type for case in self.special_cases):
            return
        definition = self.book.special_case(case_type.value)
        self.special_cases.append(
            SpecialCase(
                type=case_type,
                name=definition.name if definition else case_type.value,
                description=description or (definition.description if definition else ""),
                reference=definition.reference if definition else "",
            )
        )

    def heir_name(self, key: HeirKey) -> str:
        return self.book.heir_name(key)
