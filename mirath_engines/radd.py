"""
Module: mirath_engines.radd
Responsibility:
    Stage 8 of the distribution pipeline: when a surplus remains and no
    residuary heir took it, return it (radd) to the fixed-share holders in
    proportion to their current shares.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Never runs after a residuary allocation
    - Spouses take part only when the madhab returns to spouses, or the
      spouse is the only heir left and the madhab permits that
    - Shares of participants stay in the same ratio to each other
"""

from __future__ import annotations

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.heirs import SPOUSES
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import SpecialCaseType, StepLevel
from mirath_kernel.domain.share import ShareClassification, ShareRecord
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.radd")


def is_sole_spouse(ctx: DistributionContext) -> bool:
    """True when the only heir with a non-zero count is a spouse."""
    present = ctx.present()
    return bool(present) and all(key in SPOUSES for key in present)


def radd_participants(ctx: DistributionContext) -> list[ShareRecord]:
    include_spouses = ctx.rules.radd_to_spouse
    if not include_spouses and ctx.rules.radd_to_sole_spouse and is_sole_spouse(ctx):
        include_spouses = True
        ctx.add_note("the spouse is the only heir and receives the surplus by return")
    return [
        record
        for record in ctx.shares.values()
        if record.fraction.is_positive and (include_spouses or record.heir_key not in SPOUSES)
    ]


def apply_radd(ctx: DistributionContext) -> bool:
    remainder = ctx.remainder
    if not remainder.is_positive or ctx.residuary_assigned:
        return False

    participants = radd_participants(ctx)
    if not participants:
        return False

    weight = Rational.ZERO
    for record in participants:
        weight = weight + record.fraction

    for record in participants:
        record.add_fraction(remainder * record.fraction / weight)
        record.classification = ShareClassification.RETURN

    ctx.radd_applied = True
    ctx.add_special_case(SpecialCaseType.RADD)
    ctx.add_step(
        "Return",
        f"{remainder} is returned to " + ", ".join(r.heir_key.value for r in participants),
        StepLevel.SUCCESS,
    )
    logger.info(
        "radd_applied",
        extra={"remainder": str(remainder), "participants": [r.heir_key.value for r in participants]},
    )
    return True
