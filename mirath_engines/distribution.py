"""
Module: mirath_engines.distribution
Responsibility:
    Orchestrate the full inheritance pipeline for one estate:
    normalize -> closed-form cases -> hijab -> fixed shares -> awl ->
    residuary -> radd -> blood relatives -> rounding -> confidence.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Reads madhab policy from an injected RuleBook; shares results through
    an injected, explicitly owned ResultCache.

Invariants enforced:
    - Stage order is fixed; each stage consumes the previous one's state
    - Share fractions sum to exactly 1 whenever at least one heir (or the
      treasury) can take the estate
    - A heir in the blocked-heir log never holds a share
    - Identical inputs produce equal results, cached or not

Failure modes:
    - Input and estate-state errors become a failure DistributionResult
      carrying every error message
    - ComputationError / ArithmeticError become a failure result with the
      message "computation failed: <detail>"
    - ConfigurationError propagates

Usage:
    from mirath_engines import DistributionEngine
    from mirath_kernel.domain import Estate

    engine = DistributionEngine()
    result = engine.calculate(
        madhab="shafii",
        estate=Estate(total=120000),
        heirs={"husband": 1, "father": 1, "mother": 1},
    )
    result.share("mother").fraction   # Rational(1, 6)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mirath_config import get_rule_book
from mirath_config.schema import MadhabRules, RuleBook
from mirath_engines.arham import assign_blood_relatives
from mirath_engines.asaba import assign_residuary
from mirath_engines.awl import apply_awl
from mirath_engines.cache import CacheKey, ResultCache
from mirath_engines.confidence import score_confidence
from mirath_engines.context import DistributionContext
from mirath_engines.fard import assign_fixed_shares
from mirath_engines.hijab import apply_hijab
from mirath_engines.normalization import NormalizedInput, normalize_input
from mirath_engines.radd import apply_radd
from mirath_engines.rounding import reconcile_amounts
from mirath_engines.special_cases import apply_closed_form_case, flag_umariyyah
from mirath_engines.tracer import traced_engine
from mirath_kernel.domain.heirs import HeirCounts
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import CalculationStep, DistributionResult, StepLevel
from mirath_kernel.domain.values import Estate
from mirath_kernel.exceptions import (
    ComputationError,
    EstateStateError,
    InputError,
    InputValidationError,
    UnknownMadhabError,
)
from mirath_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.distribution")

ENGINE_VERSION = "1.0"


class DistributionEngine:
    """
    Computes inheritance distributions.

    Contract:
        ``calculate`` never raises for bad input or arithmetic failure; it
        returns a failure result instead.

    Guarantees:
        - Holds no per-call state; safe to share across threads as long as
          the injected cache is (ResultCache is)
    """

    def __init__(self, rule_book: RuleBook | None = None, cache: ResultCache | None = None):
        self._rule_book = rule_book if rule_book is not None else get_rule_book()
        self._cache = cache

    @property
    def rule_book(self) -> RuleBook:
        return self._rule_book

    @property
    def cache(self) -> ResultCache | None:
        return self._cache

    @traced_engine("distribution", ENGINE_VERSION, fingerprint_fields=("madhab", "estate", "heirs"))
    def calculate(
        self,
        *,
        madhab: str,
        estate: Estate,
        heirs: HeirCounts | Mapping[Any, Any],
    ) -> DistributionResult:
        try:
            rules = self._rule_book.madhab(madhab)
        except UnknownMadhabError as exc:
            logger.warning("unknown_madhab", extra={"madhab_id": str(madhab)})
            return DistributionResult.failure(
                madhab=str(madhab),
                madhab_name=str(madhab),
                errors=[str(exc)],
                error_code=exc.code,
            )

        with LogContext.bind(madhab=rules.madhab_id):
            return self._calculate(rules, estate, heirs)

    def _calculate(
        self,
        rules: MadhabRules,
        estate: Estate,
        heirs: HeirCounts | Mapping[Any, Any],
    ) -> DistributionResult:
        logger.info("distribution_started")

        try:
            normalized = normalize_input(estate, heirs, self._rule_book)
        except (InputError, EstateStateError) as exc:
            errors = list(exc.errors) if isinstance(exc, InputValidationError) else [str(exc)]
            logger.warning("distribution_rejected", extra={"error_code": exc.code, "errors": errors})
            return DistributionResult.failure(
                madhab=rules.madhab_id,
                madhab_name=rules.name,
                errors=errors,
                steps=[CalculationStep("Validation", "; ".join(errors), StepLevel.ERROR)],
                error_code=exc.code,
            )
        except ArithmeticError as exc:
            logger.exception("distribution_failed")
            return DistributionResult.failure(
                madhab=rules.madhab_id,
                madhab_name=rules.name,
                errors=[f"computation failed: {exc}"],
                error_code=ComputationError.code,
            )

        key = CacheKey.build(rules.madhab_id, normalized.estate, normalized.heirs, normalized.warnings)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.info("distribution_cache_hit")
                return cached

        try:
            result = self._run_pipeline(rules, normalized)
        except (ComputationError, ArithmeticError) as exc:
            logger.exception("distribution_failed")
            return DistributionResult.failure(
                madhab=rules.madhab_id,
                madhab_name=rules.name,
                errors=[f"computation failed: {exc}"],
                warnings=normalized.warnings,
                error_code=ComputationError.code,
            )

        if self._cache is not None:
            self._cache.put(key, result)

        logger.info(
            "distribution_completed",
            extra={
                "share_count": len(result.shares),
                "awl_applied": result.awl_applied,
                "radd_applied": result.radd_applied,
                "confidence": result.confidence,
            },
        )
        return result

    def _run_pipeline(self, rules: MadhabRules, normalized: NormalizedInput) -> DistributionResult:
        ctx = DistributionContext.start(self._rule_book, rules, normalized.estate, normalized.heirs)
        ctx.warnings.extend(normalized.warnings)

        estate = normalized.estate
        ctx.add_step(
            "Net estate",
            f"{estate.total} - funeral {estate.funeral} - debts {estate.debts} "
            f"- bequest {estate.will} = {estate.net_estate} {estate.currency}",
        )

        if not apply_closed_form_case(ctx):
            flag_umariyyah(ctx)
            apply_hijab(ctx)
            assign_fixed_shares(ctx)
            apply_awl(ctx)
            assign_residuary(ctx)
        apply_radd(ctx)
        assign_blood_relatives(ctx)

        if not ctx.shares:
            ctx.warnings.append("no eligible heir; nothing was distributed")

        reconcile_amounts(ctx)
        confidence = score_confidence(ctx)

        corrected_base = Rational.lcm_of_denominators(r.fraction for r in ctx.shares.values())
        for record in ctx.shares.values():
            record.base_shares = (record.fraction * corrected_base).numerator

        return DistributionResult(
            success=True,
            madhab=rules.madhab_id,
            madhab_name=rules.name,
            estate=estate,
            net_estate=estate.net_estate,
            asl=ctx.asl,
            final_base=ctx.final_base,
            corrected_base=corrected_base,
            awl_applied=ctx.awl_applied,
            awl_ratio=ctx.awl_ratio,
            radd_applied=ctx.radd_applied,
            blood_relatives_applied=ctx.blood_relatives_applied,
            shares=tuple(record.snapshot() for record in ctx.shares.values()),
            special_cases=tuple(ctx.special_cases),
            blocked=tuple(ctx.blocked),
            notes=tuple(ctx.notes),
            warnings=tuple(ctx.warnings),
            steps=tuple(ctx.steps),
            confidence=confidence,
        )
