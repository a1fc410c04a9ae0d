"""
Module: mirath_engines.rounding
Responsibility:
    Stage 10 of the distribution pipeline: turn every share fraction into
    a monetary amount in the estate currency and reconcile rounding so the
    amounts add up to the net estate exactly.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Each amount is net_estate x fraction, half-up to the minor unit
    - When the fractions sum to exactly 1, the amounts sum to the net
      estate: the difference is moved one minor unit at a time, largest
      amounts first, within a bounded number of passes
    - Deterministic: ties are broken by share order
"""

from __future__ import annotations

from decimal import Decimal

from mirath_engines.context import DistributionContext
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.rounding")

MAX_PASSES_PER_SHARE = 10


def reconcile_amounts(ctx: DistributionContext) -> Decimal:
    """
    Compute amounts and distribute any rounding difference.

    Returns:
        The difference left unreconciled (zero unless the fractions do
        not sum to one or the iteration bound was reached).
    """
    net = ctx.estate.net_estate
    minor = ctx.estate.minor_unit
    records = list(ctx.shares.values())
    for record in records:
        record.compute_amount(net, minor)

    if not records:
        return Decimal(0)

    difference = net - sum((r.amount for r in records), Decimal(0))
    if abs(difference) < minor or not ctx.allocated.is_one:
        return difference

    ordered = sorted(records, key=lambda r: r.amount, reverse=True)
    step = minor if difference > 0 else -minor
    limit = len(ordered) * MAX_PASSES_PER_SHARE
    adjusted = 0
    i = 0
    while abs(difference) >= minor and i < limit:
        record = ordered[i % len(ordered)]
        i += 1
        if step < 0 and record.amount < minor:
            continue
        record.adjust_amount(step, minor)
        difference -= step
        adjusted += 1

    logger.debug(
        "rounding_reconciled",
        extra={"adjustments": adjusted, "residual": str(difference)},
    )
    return difference
