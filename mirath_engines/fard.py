"""
Module: mirath_engines.fard
Responsibility:
    Stage 5 of the distribution pipeline: assign the Qur'anic fixed
    shares (furud) to every surviving heir category that qualifies.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Reads live counts only; excluded heirs never receive a fixed share
    - Wives, grandmothers and maternal siblings are pooled into one line
    - The father (or grandfather) with only female descendants is marked
      fixed+residuary so the residuary stage tops him up
"""

from __future__ import annotations

from collections.abc import Callable

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.heirs import HeirKey
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import StepLevel
from mirath_kernel.domain.share import ShareClassification
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.fard")

H = HeirKey
FIXED = ShareClassification.FIXED


def _half_or_two_thirds(count: int) -> Rational:
    return Rational.HALF if count == 1 else Rational.TWO_THIRDS


def _husband(ctx: DistributionContext) -> None:
    if not ctx.has(H.HUSBAND):
        return
    if ctx.has_descendants:
        ctx.add_share(H.HUSBAND, FIXED, 1, Rational.QUARTER, "¼ with descendants")
    else:
        ctx.add_share(H.HUSBAND, FIXED, 1, Rational.HALF, "½ without descendants")


def _wives(ctx: DistributionContext) -> None:
    n = ctx.count(H.WIFE)
    if n == 0:
        return
    if ctx.has_descendants:
        ctx.add_share(H.WIFE, FIXED, n, Rational.EIGHTH, "⅛ with descendants, shared by the wives")
    else:
        ctx.add_share(H.WIFE, FIXED, n, Rational.QUARTER, "¼ without descendants, shared by the wives")


def _mother(ctx: DistributionContext) -> None:
    if not ctx.has(H.MOTHER):
        return
    if ctx.umariyyah:
        if ctx.has(H.HUSBAND):
            ctx.add_share(H.MOTHER, FIXED, 1, Rational.SIXTH, "a third of the remainder after the husband")
        else:
            ctx.add_share(H.MOTHER, FIXED, 1, Rational.QUARTER, "a third of the remainder after the wife")
    elif ctx.has_descendants or ctx.all_siblings >= 2:
        ctx.add_share(H.MOTHER, FIXED, 1, Rational.SIXTH, "⅙ with descendants or two or more siblings")
    else:
        ctx.add_share(H.MOTHER, FIXED, 1, Rational.THIRD, "⅓")


def _ascendant(ctx: DistributionContext, key: HeirKey) -> None:
    if ctx.has_male_descendants:
        ctx.add_share(key, FIXED, 1, Rational.SIXTH, "⅙ with male descendants")
    elif ctx.has_female_descendants:
        ctx.add_share(
            key,
            ShareClassification.FIXED_RESIDUARY,
            1,
            Rational.SIXTH,
            "⅙ plus the residue with female descendants",
        )


def _father(ctx: DistributionContext) -> None:
    if ctx.has(H.FATHER):
        _ascendant(ctx, H.FATHER)


def _grandfather(ctx: DistributionContext) -> None:
    if not ctx.has(H.GRANDFATHER) or ctx.has(H.FATHER):
        return
    if not ctx.has_descendants and ctx.rules.grandfather_shares and ctx.full_and_paternal_siblings > 0:
        ctx.add_note("the grandfather shares the residue with the siblings in this madhab")
        return
    _ascendant(ctx, H.GRANDFATHER)


def _grandmothers(ctx: DistributionContext) -> None:
    n = ctx.count(H.GRANDMOTHER_MOTHER) + ctx.count(H.GRANDMOTHER_FATHER)
    if n == 0:
        return
    ctx.add_share(H.GRANDMOTHERS, FIXED, n, Rational.SIXTH, "⅙ shared by the grandmothers")


def _daughters(ctx: DistributionContext) -> None:
    n = ctx.count(H.DAUGHTER)
    if n == 0 or ctx.has(H.SON):
        return
    ctx.add_share(H.DAUGHTER, FIXED, n, _half_or_two_thirds(n), "½ for one, ⅔ for two or more")


def _granddaughters(ctx: DistributionContext) -> None:
    n = ctx.count(H.GRANDDAUGHTER)
    if n == 0 or ctx.has(H.SON) or ctx.has(H.GRANDSON):
        return
    daughters = ctx.count(H.DAUGHTER)
    if daughters == 0:
        ctx.add_share(H.GRANDDAUGHTER, FIXED, n, _half_or_two_thirds(n), "½ for one, ⅔ for two or more")
    elif daughters == 1:
        ctx.add_share(H.GRANDDAUGHTER, FIXED, n, Rational.SIXTH, "⅙ completing the two thirds")


def _full_sisters(ctx: DistributionContext) -> None:
    n = ctx.count(H.FULL_SISTER)
    if n == 0 or ctx.has(H.FULL_BROTHER) or ctx.has_descendants or ctx.has_male_ascendant:
        return
    ctx.add_share(H.FULL_SISTER, FIXED, n, _half_or_two_thirds(n), "½ for one, ⅔ for two or more")


def _paternal_sisters(ctx: DistributionContext) -> None:
    n = ctx.count(H.PATERNAL_SISTER)
    if (
        n == 0
        or ctx.has(H.PATERNAL_BROTHER)
        or ctx.has(H.FULL_BROTHER)
        or ctx.has_descendants
        or ctx.has_male_ascendant
    ):
        return
    full_sisters = ctx.count(H.FULL_SISTER)
    if full_sisters == 0:
        ctx.add_share(
            H.PATERNAL_SISTER, FIXED, n, _half_or_two_thirds(n), "½ for one, ⅔ for two or more"
        )
    elif full_sisters == 1:
        ctx.add_share(H.PATERNAL_SISTER, FIXED, n, Rational.SIXTH, "⅙ completing the two thirds")


def _maternal_siblings(ctx: DistributionContext) -> None:
    n = ctx.maternal_siblings
    if n == 0 or ctx.has_descendants or ctx.has_male_ascendant:
        return
    if n == 1:
        ctx.add_share(H.MATERNAL_SIBLINGS, FIXED, 1, Rational.SIXTH, "⅙ for a single maternal sibling")
    else:
        ctx.add_share(H.MATERNAL_SIBLINGS, FIXED, n, Rational.THIRD, "⅓ shared equally")


FIXED_SHARE_RULES: tuple[Callable[[DistributionContext], None], ...] = (
    _husband,
    _wives,
    _mother,
    _father,
    _grandfather,
    _grandmothers,
    _daughters,
    _granddaughters,
    _full_sisters,
    _paternal_sisters,
    _maternal_siblings,
)


def assign_fixed_shares(ctx: DistributionContext) -> None:
    for rule in FIXED_SHARE_RULES:
        rule(ctx)

    if ctx.shares:
        ctx.add_step(
            "Fixed shares",
            ", ".join(f"{key.value} {record.fraction}" for key, record in ctx.shares.items()),
        )
    else:
        ctx.add_step("Fixed shares", "no heir takes a fixed share", StepLevel.INFO)
    logger.debug(
        "fixed_shares_assigned",
        extra={"shares": {key.value: str(r.fraction) for key, r in ctx.shares.items()}},
    )
