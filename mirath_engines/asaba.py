"""
Module: mirath_engines.asaba
Responsibility:
    Stage 7 of the distribution pipeline: give whatever the fixed shares
    leave to exactly one residuary ('asaba) class, chosen by a fixed
    precedence table, split by integer weights (a male takes twice a
    female's portion).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - At most one residuary class receives the remainder
    - A heir already holding a fixed share keeps it; the residuary portion
      is added and the line becomes fixed+residuary
    - Nothing is allocated when the remainder is zero

Usage:
    from mirath_engines.asaba import RESIDUARY_CLASSES, assign_residuary

    selected = assign_residuary(ctx)   # ResiduaryClass or None
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.heirs import DISTANT_RESIDUARIES, HeirKey
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import SpecialCaseType, StepLevel
from mirath_kernel.domain.share import ShareClassification
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.asaba")

H = HeirKey

# (heir, weight per head)
Member = tuple[HeirKey, int]


@dataclass(frozen=True)
class ResiduaryClass:
    """One row of the residuary precedence table."""

    name: str
    applies: Callable[[DistributionContext], bool]
    members: Callable[[DistributionContext], tuple[Member, ...]]
    special_case: SpecialCaseType | None = None
    prepare: Callable[[DistributionContext], None] | None = None


# ---------------------------------------------------------------------------
# "With-other" residuaries: sisters alongside daughters
# ---------------------------------------------------------------------------


def _exclude_after_sister_with_daughters(ctx: DistributionContext, sister: HeirKey) -> None:
    ctx.remove_share(sister)
    farther = (H.PATERNAL_BROTHER, H.PATERNAL_SISTER) if sister is H.FULL_SISTER else ()
    for heir in (*farther, *DISTANT_RESIDUARIES):
        if ctx.block(heir, sister.value, "a sister made residuary by daughters excludes farther agnates"):
            ctx.remove_share(heir)


def _full_sister_with_daughters_applies(ctx: DistributionContext) -> bool:
    return ctx.has(H.FULL_SISTER) and ctx.has_female_descendants


def _paternal_sister_with_daughters_applies(ctx: DistributionContext) -> bool:
    return (
        ctx.has(H.PATERNAL_SISTER)
        and ctx.has_female_descendants
        and not ctx.has(H.FULL_SISTER)
    )


def _grandfather_with_siblings_applies(ctx: DistributionContext) -> bool:
    return (
        ctx.has(H.GRANDFATHER)
        and ctx.rules.grandfather_shares
        and ctx.full_and_paternal_siblings > 0
    )


def _nearest_distant(ctx: DistributionContext) -> tuple[Member, ...]:
    for key in DISTANT_RESIDUARIES:
        if ctx.has(key):
            return ((key, 1),)
    return ()


RESIDUARY_CLASSES: tuple[ResiduaryClass, ...] = (
    ResiduaryClass(
        name="sons",
        applies=lambda ctx: ctx.has(H.SON),
        members=lambda ctx: ((H.SON, 2), (H.DAUGHTER, 1)),
    ),
    ResiduaryClass(
        name="son's sons",
        applies=lambda ctx: ctx.has(H.GRANDSON),
        members=lambda ctx: ((H.GRANDSON, 2), (H.GRANDDAUGHTER, 1)),
    ),
    ResiduaryClass(
        name="father",
        applies=lambda ctx: ctx.has(H.FATHER),
        members=lambda ctx: ((H.FATHER, 1),),
    ),
    ResiduaryClass(
        name="grandfather with siblings",
        applies=_grandfather_with_siblings_applies,
        members=lambda ctx: (
            (H.GRANDFATHER, 2),
            (H.FULL_BROTHER, 2),
            (H.FULL_SISTER, 1),
            (H.PATERNAL_BROTHER, 2),
            (H.PATERNAL_SISTER, 1),
        ),
        special_case=SpecialCaseType.GRANDFATHER_WITH_SIBLINGS,
    ),
    ResiduaryClass(
        name="grandfather",
        applies=lambda ctx: ctx.has(H.GRANDFATHER),
        members=lambda ctx: ((H.GRANDFATHER, 1),),
    ),
    ResiduaryClass(
        name="full brothers",
        applies=lambda ctx: ctx.has(H.FULL_BROTHER),
        members=lambda ctx: ((H.FULL_BROTHER, 2), (H.FULL_SISTER, 1)),
    ),
    ResiduaryClass(
        name="full sisters with daughters",
        applies=_full_sister_with_daughters_applies,
        members=lambda ctx: ((H.FULL_SISTER, 1),),
        special_case=SpecialCaseType.SISTER_WITH_DAUGHTERS,
        prepare=lambda ctx: _exclude_after_sister_with_daughters(ctx, H.FULL_SISTER),
    ),
    ResiduaryClass(
        name="paternal brothers",
        applies=lambda ctx: ctx.has(H.PATERNAL_BROTHER),
        members=lambda ctx: ((H.PATERNAL_BROTHER, 2), (H.PATERNAL_SISTER, 1)),
    ),
    ResiduaryClass(
        name="paternal sisters with daughters",
        applies=_paternal_sister_with_daughters_applies,
        members=lambda ctx: ((H.PATERNAL_SISTER, 1),),
        special_case=SpecialCaseType.PATERNAL_SISTER_WITH_DAUGHTERS,
        prepare=lambda ctx: _exclude_after_sister_with_daughters(ctx, H.PATERNAL_SISTER),
    ),
    ResiduaryClass(
        name="distant agnates",
        applies=lambda ctx: bool(_nearest_distant(ctx)),
        members=_nearest_distant,
    ),
)


def select_residuary_class(ctx: DistributionContext) -> ResiduaryClass | None:
    for residuary in RESIDUARY_CLASSES:
        if residuary.applies(ctx):
            return residuary
    return None


def assign_residuary(ctx: DistributionContext) -> ResiduaryClass | None:
    """Split the remainder across the first applicable residuary class."""
    remainder = ctx.remainder
    if not remainder.is_positive:
        ctx.add_step("Residue", "nothing remains for residuary heirs", StepLevel.SUCCESS)
        return None

    residuary = select_residuary_class(ctx)
    if residuary is None:
        ctx.add_step("Residue", f"{remainder} remains with no residuary heir")
        return None

    if residuary.prepare is not None:
        residuary.prepare(ctx)
        remainder = ctx.remainder

    members = [(key, weight * ctx.count(key)) for key, weight in residuary.members(ctx) if ctx.has(key)]
    total_weight = sum(w for _, w in members)

    for key, weight in members:
        portion = remainder * Rational(weight, total_weight)
        record = ctx.shares.get(key)
        if record is not None:
            record.add_fraction(portion)
            record.classification = ShareClassification.FIXED_RESIDUARY
            record.reason = f"{record.reason}; plus residue" if record.reason else "residue"
        else:
            ctx.add_share(key, ShareClassification.RESIDUARY, ctx.count(key), portion, "residue")

    if residuary.special_case is not None:
        ctx.add_special_case(residuary.special_case)
    ctx.residuary_assigned = True
    ctx.add_step(
        "Residue",
        f"{remainder} goes to the {residuary.name}: "
        + ", ".join(f"{key.value}×{ctx.count(key)}" for key, _ in members),
    )
    logger.debug(
        "residuary_assigned",
        extra={"class": residuary.name, "remainder": str(remainder)},
    )
    return residuary
