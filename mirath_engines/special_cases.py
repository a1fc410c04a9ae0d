"""
Module: mirath_engines.special_cases
Responsibility:
    Stage 3 of the distribution pipeline: detect the two closed-form
    problems (al-Musharraka, al-Akdariyya) that replace blocking, fixed
    shares, awl and residuary allocation outright, and flag al-Umariyyah,
    which only changes the mother's fixed share.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Detection reads the normalized, pre-blocking counts
    - Musharraka is checked before Akdariyya; at most one applies
    - Each closed form allocates exactly the whole estate
    - Present heirs outside a closed form are logged as excluded by it
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.heirs import DESCENDANTS, MATERNAL_SIBLINGS, HeirCounts, HeirKey
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import SpecialCaseType, StepLevel
from mirath_kernel.domain.share import ShareClassification
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.special_cases")

H = HeirKey


def _no_descendants(heirs: HeirCounts) -> bool:
    return all(heirs[k] == 0 for k in DESCENDANTS)


def _maternal_siblings(heirs: HeirCounts) -> int:
    return sum(heirs[k] for k in MATERNAL_SIBLINGS)


def _full_siblings(heirs: HeirCounts) -> int:
    return heirs[H.FULL_BROTHER] + heirs[H.FULL_SISTER]


def _all_siblings(heirs: HeirCounts) -> int:
    return sum(
        heirs[k]
        for k in (
            H.FULL_BROTHER,
            H.FULL_SISTER,
            H.PATERNAL_BROTHER,
            H.PATERNAL_SISTER,
            H.MATERNAL_BROTHER,
            H.MATERNAL_SISTER,
        )
    )


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def is_musharraka(heirs: HeirCounts) -> bool:
    """Husband, mother or maternal grandmother, 2+ maternal siblings, full siblings."""
    return (
        heirs[H.HUSBAND] > 0
        and (heirs[H.MOTHER] > 0 or heirs[H.GRANDMOTHER_MOTHER] > 0)
        and _maternal_siblings(heirs) >= 2
        and _full_siblings(heirs) > 0
        and _no_descendants(heirs)
        and heirs[H.FATHER] == 0
        and heirs[H.GRANDFATHER] == 0
    )


def is_akdariyya(heirs: HeirCounts) -> bool:
    """Husband, mother, grandfather and a full sister, nobody nearer."""
    return (
        heirs[H.HUSBAND] > 0
        and heirs[H.MOTHER] > 0
        and heirs[H.GRANDFATHER] > 0
        and heirs[H.FULL_SISTER] > 0
        and _no_descendants(heirs)
        and heirs[H.FATHER] == 0
        and heirs[H.FULL_BROTHER] == 0
    )


def is_umariyyah(heirs: HeirCounts) -> bool:
    """A spouse with both parents and nobody else who could affect the mother."""
    return (
        (heirs[H.HUSBAND] > 0 or heirs[H.WIFE] > 0)
        and heirs[H.FATHER] > 0
        and heirs[H.MOTHER] > 0
        and _no_descendants(heirs)
        and _all_siblings(heirs) == 0
        and heirs[H.GRANDFATHER] == 0
    )


# ---------------------------------------------------------------------------
# Closed-form allocations
# ---------------------------------------------------------------------------


def _apply_musharraka(ctx: DistributionContext) -> tuple[HeirKey, ...]:
    heirs = ctx.initial
    mother_line = H.MOTHER if heirs[H.MOTHER] > 0 else H.GRANDMOTHER_MOTHER
    ctx.add_share(H.HUSBAND, ShareClassification.FIXED, 1, Rational.HALF, "½, no descendants")
    ctx.add_share(mother_line, ShareClassification.FIXED, 1, Rational.SIXTH, "⅙ with 2+ siblings")
    pooled = _maternal_siblings(heirs) + _full_siblings(heirs)
    ctx.add_share(
        H.SHARED_SIBLINGS,
        ShareClassification.FIXED,
        pooled,
        Rational.THIRD,
        "⅓ shared equally by maternal and full siblings",
    )
    ctx.asl = 6
    ctx.final_base = 6
    return (H.HUSBAND, mother_line, H.FULL_BROTHER, H.FULL_SISTER, *MATERNAL_SIBLINGS)


def _apply_akdariyya(ctx: DistributionContext) -> tuple[HeirKey, ...]:
    heirs = ctx.initial
    ctx.add_share(H.HUSBAND, ShareClassification.FIXED, 1, Rational(9, 27), "½ = 9/27")
    ctx.add_share(H.MOTHER, ShareClassification.FIXED, 1, Rational(6, 27), "⅓ = 6/27")
    ctx.add_share(
        H.GRANDFATHER,
        ShareClassification.FIXED_RESIDUARY,
        1,
        Rational(8, 27),
        "⅙ then shared with the sister 2:1",
    )
    ctx.add_share(
        H.FULL_SISTER,
        ShareClassification.FIXED_RESIDUARY,
        heirs[H.FULL_SISTER],
        Rational(4, 27),
        "½ then shared with the grandfather 2:1",
    )
    ctx.asl = 6
    ctx.final_base = 27
    ctx.awl_applied = True
    ctx.awl_ratio = Rational(6, 27)
    return (H.HUSBAND, H.MOTHER, H.GRANDFATHER, H.FULL_SISTER)


@dataclass(frozen=True)
class ClosedFormCase:
    case_type: SpecialCaseType
    title: str
    enabled: Callable[[DistributionContext], bool]
    detect: Callable[[HeirCounts], bool]
    apply: Callable[[DistributionContext], tuple[HeirKey, ...]]


CLOSED_FORM_CASES: tuple[ClosedFormCase, ...] = (
    ClosedFormCase(
        case_type=SpecialCaseType.MUSHARRAKA,
        title="Al-Musharraka",
        enabled=lambda ctx: ctx.rules.musharraka_enabled,
        detect=is_musharraka,
        apply=_apply_musharraka,
    ),
    ClosedFormCase(
        case_type=SpecialCaseType.AKDARIYYA,
        title="Al-Akdariyya",
        enabled=lambda ctx: ctx.rules.akdariyya_enabled,
        detect=is_akdariyya,
        apply=_apply_akdariyya,
    ),
)


def apply_closed_form_case(ctx: DistributionContext) -> bool:
    """
    Run the first enabled closed-form case whose conditions hold.

    Returns:
        True if a closed form produced the whole distribution, in which
        case blocking, fixed shares, awl and residuary allocation are skipped.
    """
    for case in CLOSED_FORM_CASES:
        if not case.enabled(ctx) or not case.detect(ctx.initial):
            continue

        ctx.add_special_case(case.case_type)
        members = case.apply(ctx)
        for heir in ctx.present():
            if heir not in members:
                ctx.block(heir, case.case_type.value, f"not an heir in {case.title}")
        if case.case_type is SpecialCaseType.AKDARIYYA:
            ctx.add_special_case(SpecialCaseType.AWL)
        ctx.add_step(case.title, f"closed-form distribution over {ctx.final_base}", StepLevel.WARNING)
        logger.info("closed_form_case_applied", extra={"case": case.case_type.value})
        return True
    return False


def flag_umariyyah(ctx: DistributionContext) -> bool:
    """Record al-Umariyyah; Stage 5 then gives the mother a third of the remainder."""
    if not is_umariyyah(ctx.initial):
        return False
    ctx.umariyyah = True
    ctx.add_special_case(SpecialCaseType.UMARIYYAH)
    ctx.add_step("Al-Umariyyah", "the mother takes a third of what remains after the spouse")
    return True
