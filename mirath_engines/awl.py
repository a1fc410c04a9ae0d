"""
Module: mirath_engines.awl
Responsibility:
    Stage 6 of the distribution pipeline: find the problem's base (asl)
    and, when the fixed shares exceed it, raise the base to their sum and
    scale every fixed share down proportionally (awl).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - asl == LCM of the non-zero fixed-share denominators (1 if none)
    - After this stage the fixed shares never sum above 1, so the
      residuary stage never sees a negative remainder
"""

from __future__ import annotations

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.heirs import HeirKey
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import SpecialCaseType, StepLevel
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.awl")


def apply_awl(ctx: DistributionContext) -> bool:
    """Set asl / final_base on the context; return True if awl was applied."""
    records = list(ctx.shares.values())
    asl = Rational.lcm_of_denominators(r.fraction for r in records)

    raw: dict[HeirKey, int] = {}
    for record in records:
        scaled = record.fraction * asl
        raw[record.heir_key] = scaled.numerator  # integral: asl is a multiple of the denominator
    total = sum(raw.values())

    ctx.asl = asl

    if total <= asl:
        ctx.final_base = asl
        if records:
            ctx.add_step("Base", f"the problem is based on {asl}; fixed shares take {total}")
        return False

    for record in records:
        record.set_fraction(Rational(raw[record.heir_key], total))
    ctx.final_base = total
    ctx.awl_applied = True
    ctx.awl_ratio = Rational(asl, total)
    ctx.add_special_case(SpecialCaseType.AWL)
    ctx.add_step("Awl", f"the base is raised from {asl} to {total}", StepLevel.WARNING)
    logger.info("awl_applied", extra={"asl": asl, "final_base": total})
    return True
