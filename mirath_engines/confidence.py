"""
Module: mirath_engines.confidence
Responsibility:
    Stage 11 of the distribution pipeline: a heuristic confidence score
    that drops as a problem relies on less settled rules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Score is a Decimal in [0.80, 1.00]
    - A fraction sum off by more than 0.001 adds a warning
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from mirath_engines.context import DistributionContext
from mirath_kernel.domain.rational import Rational

AWL_FACTOR = Decimal("0.98")
RADD_FACTOR = Decimal("0.97")
BLOOD_RELATIVES_FACTOR = Decimal("0.95")
SPECIAL_CASES_FACTOR = Decimal("0.96")
BLOCKED_FACTOR = Decimal("0.98")
DRIFT_FACTOR = Decimal("0.90")
FLOOR = Decimal("0.80")

DRIFT_TOLERANCE = Rational(1, 1000)


def score_confidence(ctx: DistributionContext) -> Decimal:
    score = Decimal("1")
    if ctx.awl_applied:
        score *= AWL_FACTOR
    if ctx.radd_applied:
        score *= RADD_FACTOR
    if ctx.blood_relatives_applied:
        score *= BLOOD_RELATIVES_FACTOR
    if len(ctx.special_cases) > 2:
        score *= SPECIAL_CASES_FACTOR
    if len(ctx.blocked) > 3:
        score *= BLOCKED_FACTOR

    drift = abs(Rational.ONE - ctx.allocated)
    if drift > DRIFT_TOLERANCE:
        score *= DRIFT_FACTOR
        ctx.warnings.append(
            f"shares sum to {ctx.allocated}, not 1; {Rational.ONE - ctx.allocated} is unallocated"
        )

    return max(score, FLOOR).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
