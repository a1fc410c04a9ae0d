"""
Rule Book Validator (``mirath_config.validator``).

Responsibility
--------------
Validates a parsed ``RuleBook`` before it is handed to any engine,
ensuring structural integrity of the madhab table and heir metadata.

Architecture position
---------------------
**Config layer** -- called by ``mirath_config.get_rule_book`` after
loading.  Has no dependency on engines or services.

Invariants enforced
-------------------
* The four madhabs (shafii, hanafi, maliki, hanbali) are present, each once.
* Every input heir category has exactly one definition and one group.
* Per-key maxima, when present, are integers >= 1.
* Blood-relative classes are positive integers on blood_relatives only.
* Every special case the engine can report has catalogue text.
* Cache capacity is a positive integer.

Failure modes
-------------
* Validation errors (``RuleBookValidationResult.errors``)  -> the rule
  book MUST NOT be used.
* Validation warnings  -> usable, but should be reviewed.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from mirath_config.schema import RuleBook
from mirath_kernel.domain.heirs import INPUT_HEIRS, SYNTHETIC_KEYS, HeirGroup
from mirath_kernel.domain.result import SpecialCaseType

REQUIRED_MADHABS: tuple[str, ...] = ("shafii", "hanafi", "maliki", "hanbali")


@dataclass
class RuleBookValidationResult:
    """
    Result of rule book validation.

    Contract
    --------
    * ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_rule_book(book: RuleBook) -> RuleBookValidationResult:
    """
    Validate a parsed rule book.

    Postconditions:
        - Returns a ``RuleBookValidationResult`` with errors and warnings.
    """
    result = RuleBookValidationResult()

    _validate_madhabs(book, result)
    _validate_heir_coverage(book, result)
    _validate_heir_constraints(book, result)
    _validate_special_cases(book, result)
    _validate_engine_options(book, result)

    return result


def _validate_madhabs(book: RuleBook, result: RuleBookValidationResult) -> None:
    counts = Counter(m.madhab_id for m in book.madhabs)
    for madhab_id in REQUIRED_MADHABS:
        if counts[madhab_id] == 0:
            result.add_error(f"Missing madhab: {madhab_id}")
    for madhab_id, n in counts.items():
        if n > 1:
            result.add_error(f"Duplicate madhab: {madhab_id} appears {n} times")
        if madhab_id not in REQUIRED_MADHABS:
            result.add_warning(f"Unrecognised madhab id: {madhab_id}")
    for rules in book.madhabs:
        if rules.remainder_to_treasury and rules.blood_relatives_enabled:
            result.add_warning(
                f"Madhab '{rules.madhab_id}' enables both blood relatives and treasury "
                "escheat; blood relatives take precedence"
            )


def _validate_heir_coverage(book: RuleBook, result: RuleBookValidationResult) -> None:
    counts = Counter(d.key for d in book.heirs)
    for key in INPUT_HEIRS:
        if counts[key] == 0:
            result.add_error(f"Heir category '{key.value}' has no definition")
    for key, n in counts.items():
        if n > 1:
            result.add_error(f"Heir category '{key.value}' is defined {n} times")
    for definition in book.heirs:
        if definition.key in SYNTHETIC_KEYS:
            continue
        if definition.group is None:
            result.add_error(f"Heir category '{definition.key.value}' has no group")
    for key in SYNTHETIC_KEYS:
        if counts[key] == 0:
            result.add_warning(f"Pooled share '{key.value}' has no display name")


def _validate_heir_constraints(book: RuleBook, result: RuleBookValidationResult) -> None:
    for definition in book.heirs:
        name = definition.key.value
        if definition.max_count is not None and (
            not isinstance(definition.max_count, int)
            or isinstance(definition.max_count, bool)
            or definition.max_count < 1
        ):
            result.add_error(f"Heir '{name}' max must be an integer >= 1, got {definition.max_count!r}")
        if definition.blood_class is not None:
            if not isinstance(definition.blood_class, int) or definition.blood_class < 1:
                result.add_error(
                    f"Heir '{name}' blood_class must be a positive integer, "
                    f"got {definition.blood_class!r}"
                )
            if definition.group is not HeirGroup.BLOOD_RELATIVES:
                result.add_error(f"Heir '{name}' has a blood_class but is not a blood relative")
        elif definition.group is HeirGroup.BLOOD_RELATIVES:
            result.add_error(f"Blood relative '{name}' has no blood_class")


def _validate_special_cases(book: RuleBook, result: RuleBookValidationResult) -> None:
    known = {case.value for case in SpecialCaseType}
    defined = {d.case_type for d in book.special_cases}
    for case_type in sorted(known - defined):
        result.add_error(f"Special case '{case_type}' has no catalogue entry")
    for case_type in sorted(defined - known):
        result.add_warning(f"Special case '{case_type}' is never reported by the engine")


def _validate_engine_options(book: RuleBook, result: RuleBookValidationResult) -> None:
    capacity = book.engine.cache_capacity
    if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 1:
        result.add_error(f"engine.cache.capacity must be a positive integer, got {capacity!r}")
