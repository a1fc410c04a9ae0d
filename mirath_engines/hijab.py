"""
Module: mirath_engines.hijab
Responsibility:
    Stage 4 of the distribution pipeline: exclusion (hijab) of heirs by
    nearer relatives, expressed as an ordered table of rules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Rules run in table order; each reads the counts left by earlier rules
    - Every exclusion is logged as {heir, blocked_by, reason}
    - An excluded heir's count is zero for all later stages

Usage:
    from mirath_engines.hijab import HIJAB_RULES, apply_hijab

    blocked = apply_hijab(ctx)

    # or evaluate a single rule in isolation
    exclusions = HIJAB_RULES[0].evaluate(ctx)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.heirs import (
    DESCENDANTS,
    DISTANT_RESIDUARIES,
    FULL_AND_PATERNAL_SIBLINGS,
    MATERNAL_SIBLINGS,
    HeirKey,
)
from mirath_kernel.domain.result import BlockedHeir, StepLevel
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.hijab")

H = HeirKey


@dataclass(frozen=True)
class Exclusion:
    heir: HeirKey
    blocked_by: str
    reason: str


@dataclass(frozen=True)
class HijabRule:
    """One row of the exclusion table."""

    number: int
    description: str
    evaluate: Callable[[DistributionContext], tuple[Exclusion, ...]]


def _first_present(ctx: DistributionContext, keys: tuple[HeirKey, ...]) -> HeirKey | None:
    for key in keys:
        if ctx.has(key):
            return key
    return None


def _exclude(heirs: tuple[HeirKey, ...], blocker: HeirKey | str, reason: str) -> tuple[Exclusion, ...]:
    label = blocker.value if isinstance(blocker, HeirKey) else blocker
    return tuple(Exclusion(heir=h, blocked_by=label, reason=reason) for h in heirs)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _grandfather_by_father(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if not ctx.has(H.FATHER):
        return ()
    return _exclude((H.GRANDFATHER,), H.FATHER, "the father excludes the grandfather")


def _grandmothers_by_mother(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if not ctx.has(H.MOTHER):
        return ()
    return _exclude(
        (H.GRANDMOTHER_MOTHER, H.GRANDMOTHER_FATHER), H.MOTHER, "the mother excludes all grandmothers"
    )


def _paternal_grandmother_by_father(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if not ctx.has(H.FATHER):
        return ()
    return _exclude(
        (H.GRANDMOTHER_FATHER,), H.FATHER, "the father excludes his own mother"
    )


def _grandchildren_by_son(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if not ctx.has(H.SON):
        return ()
    return _exclude((H.GRANDSON, H.GRANDDAUGHTER), H.SON, "the son excludes the son's children")


def _granddaughters_by_daughters(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if ctx.count(H.DAUGHTER) < 2 or ctx.has(H.GRANDSON):
        return ()
    return _exclude(
        (H.GRANDDAUGHTER,),
        H.DAUGHTER,
        "two or more daughters complete the two thirds and no grandson makes her residuary",
    )


def _siblings_by_son_or_father(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    blocker = _first_present(ctx, (H.FATHER, H.SON, H.GRANDSON))
    if blocker is None:
        return ()
    return _exclude(
        FULL_AND_PATERNAL_SIBLINGS,
        blocker,
        "a son, son's son or father excludes full and paternal siblings",
    )


def _siblings_by_grandfather(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if not ctx.has(H.GRANDFATHER) or ctx.rules.grandfather_shares:
        return ()
    if ctx.full_and_paternal_siblings > 0:
        ctx.add_note("the grandfather excludes full and paternal siblings in this madhab")
    return _exclude(
        FULL_AND_PATERNAL_SIBLINGS,
        H.GRANDFATHER,
        "the grandfather stands in the father's place and excludes siblings",
    )


def _maternal_siblings_by_lineage(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    blocker = _first_present(ctx, DESCENDANTS) or _first_present(ctx, (H.FATHER, H.GRANDFATHER))
    if blocker is None:
        return ()
    return _exclude(
        MATERNAL_SIBLINGS,
        blocker,
        "any descendant or male ascendant excludes maternal siblings",
    )


def _paternal_brother_by_full_brother(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if not ctx.has(H.FULL_BROTHER):
        return ()
    return _exclude(
        (H.PATERNAL_BROTHER,), H.FULL_BROTHER, "the full brother excludes the paternal brother"
    )


def _paternal_sister_by_full_sisters(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    if ctx.count(H.FULL_SISTER) < 2 or ctx.has(H.PATERNAL_BROTHER):
        return ()
    return _exclude(
        (H.PATERNAL_SISTER,),
        H.FULL_SISTER,
        "two or more full sisters complete the two thirds and no paternal brother makes her residuary",
    )


def _distant_residuaries(ctx: DistributionContext) -> tuple[Exclusion, ...]:
    closer = [H.FATHER, H.SON, H.GRANDSON, H.FULL_BROTHER, H.PATERNAL_BROTHER]
    if ctx.rules.grandfather_shares:
        closer.append(H.GRANDFATHER)
    blocker = _first_present(ctx, tuple(closer))
    if blocker is not None:
        return _exclude(DISTANT_RESIDUARIES, blocker, "a nearer residuary excludes the distant tier")

    nearest = _first_present(ctx, DISTANT_RESIDUARIES)
    if nearest is None:
        return ()
    farther = DISTANT_RESIDUARIES[DISTANT_RESIDUARIES.index(nearest) + 1 :]
    return _exclude(farther, nearest, "a nearer category of the distant tier excludes farther ones")


HIJAB_RULES: tuple[HijabRule, ...] = (
    HijabRule(1, "father excludes grandfather", _grandfather_by_father),
    HijabRule(2, "mother excludes both grandmothers", _grandmothers_by_mother),
    HijabRule(3, "father excludes paternal grandmother", _paternal_grandmother_by_father),
    HijabRule(4, "son excludes son's children", _grandchildren_by_son),
    HijabRule(5, "two daughters exclude son's daughter absent a son's son", _granddaughters_by_daughters),
    HijabRule(6, "son, son's son or father excludes full and paternal siblings", _siblings_by_son_or_father),
    HijabRule(7, "grandfather excludes full and paternal siblings", _siblings_by_grandfather),
    HijabRule(8, "descendants and male ascendants exclude maternal siblings", _maternal_siblings_by_lineage),
    HijabRule(9, "full brother excludes paternal brother", _paternal_brother_by_full_brother),
    HijabRule(10, "two full sisters exclude paternal sister", _paternal_sister_by_full_sisters),
    HijabRule(11, "nearer residuaries exclude the distant tier", _distant_residuaries),
)


def apply_hijab(ctx: DistributionContext) -> list[BlockedHeir]:
    """Run every rule in order; return the entries added to the blocked-heir log."""
    start = len(ctx.blocked)
    for rule in HIJAB_RULES:
        for exclusion in rule.evaluate(ctx):
            if ctx.block(exclusion.heir, exclusion.blocked_by, exclusion.reason):
                logger.debug(
                    "hijab_applied",
                    extra={
                        "rule": rule.number,
                        "heir": exclusion.heir.value,
                        "blocked_by": exclusion.blocked_by,
                    },
                )

    added = ctx.blocked[start:]
    if added:
        ctx.add_step(
            "Exclusion",
            f"{len(added)} heir categor{'y' if len(added) == 1 else 'ies'} excluded: "
            + ", ".join(entry.heir.value for entry in added),
            StepLevel.WARNING,
        )
    else:
        ctx.add_step("Exclusion", "no heir is excluded", StepLevel.SUCCESS)
    return added
