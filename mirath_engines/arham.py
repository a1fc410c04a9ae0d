"""
Module: mirath_engines.arham
Responsibility:
    Stage 9 of the distribution pipeline: a surplus nobody else could take
    goes to the nearest class of blood relatives (dhawu al-arham), or, in
    a madhab that does not recognise them, to the public treasury.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Only the nearest non-empty class inherits, split by head count
    - Treasury escheat happens only when blood relatives are disabled and
      the madhab sends the remainder to the treasury
"""

from __future__ import annotations

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.heirs import HeirKey
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import SpecialCaseType
from mirath_kernel.domain.share import ShareClassification
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.arham")


def nearest_blood_class(ctx: DistributionContext) -> tuple[int, tuple[HeirKey, ...]] | None:
    for rank, keys in ctx.book.blood_classes():
        present = tuple(k for k in keys if ctx.has(k))
        if present:
            return rank, present
    return None


def assign_blood_relatives(ctx: DistributionContext) -> bool:
    """Award any remaining surplus; True if something was awarded."""
    remainder = ctx.remainder
    if not remainder.is_positive:
        return False

    if ctx.rules.blood_relatives_enabled:
        selected = nearest_blood_class(ctx)
        if selected is None:
            return False
        rank, keys = selected
        heads = sum(ctx.count(k) for k in keys)
        for key in keys:
            ctx.add_share(
                key,
                ShareClassification.BLOOD_RELATIVE,
                ctx.count(key),
                remainder * Rational(ctx.count(key), heads),
                f"blood relative, class {rank}",
            )
        ctx.blood_relatives_applied = True
        ctx.add_special_case(SpecialCaseType.BLOOD_RELATIVES)
        ctx.add_step("Blood relatives", f"{remainder} goes to class {rank}: " + ", ".join(k.value for k in keys))
        logger.info("blood_relatives_applied", extra={"class": rank, "remainder": str(remainder)})
        return True

    if ctx.rules.remainder_to_treasury:
        ctx.add_share(HeirKey.TREASURY, ShareClassification.TREASURY, 1, remainder, "no heir takes the surplus")
        ctx.add_note("the surplus escheats to the public treasury in this madhab")
        ctx.add_step("Treasury", f"{remainder} goes to the public treasury")
        logger.info("treasury_escheat", extra={"remainder": str(remainder)})
        return True

    return False
