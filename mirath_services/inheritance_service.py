"""
Module: mirath_services.inheritance_service
Responsibility:
    Caller-facing service around DistributionEngine: owns the shared
    result cache, binds a calculation id into the log context and
    measures wall-clock time outside the pure computation.

Architecture position:
    Services -- the only layer that reads the clock or mints ids.

Invariants enforced:
    - Elapsed time lives on CalculationOutcome, never on DistributionResult
    - One ResultCache per service instance, sized from the rule book

Usage:
    from mirath_services import InheritanceService
    from mirath_kernel.domain import Estate

    service = InheritanceService()
    outcome = service.calculate("hanbali", Estate(total=90000), {"wife": 1, "son": 2})
    outcome.result.share("son").amount
    outcome.elapsed_ms
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from mirath_config import get_rule_book
from mirath_config.schema import RuleBook
from mirath_engines.cache import ResultCache
from mirath_engines.distribution import DistributionEngine
from mirath_kernel.domain.heirs import HeirCounts
from mirath_kernel.domain.result import DistributionResult
from mirath_kernel.domain.values import Estate
from mirath_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.inheritance")


@dataclass(frozen=True)
class CalculationOutcome:
    """A result together with caller-side metadata."""

    result: DistributionResult
    elapsed_ms: float
    calculation_id: str

    @property
    def success(self) -> bool:
        return self.result.success


class InheritanceService:
    """
    Entry point for applications.

    Contract:
        Either pass a ready ``engine`` (its cache, if any, is used) or let
        the service build one from ``rule_book`` and ``cache``.
    """

    def __init__(
        self,
        engine: DistributionEngine | None = None,
        cache: ResultCache | None = None,
        rule_book: RuleBook | None = None,
    ):
        if engine is not None:
            if cache is not None and engine.cache is not cache:
                raise ValueError("pass either an engine or a cache, not both")
            self._engine = engine
            return
        book = rule_book if rule_book is not None else get_rule_book()
        if cache is None:
            cache = ResultCache(
                capacity=book.engine.cache_capacity,
                eviction=book.engine.cache_eviction,
            )
        self._engine = DistributionEngine(rule_book=book, cache=cache)

    @property
    def engine(self) -> DistributionEngine:
        return self._engine

    @property
    def cache(self) -> ResultCache | None:
        return self._engine.cache

    def calculate(
        self,
        madhab: str,
        estate: Estate,
        heirs: HeirCounts | Mapping[Any, Any],
        calculation_id: str | None = None,
    ) -> CalculationOutcome:
        calculation_id = calculation_id or str(uuid4())
        with LogContext.bind(calculation_id=calculation_id):
            t0 = time.perf_counter()
            result = self._engine.calculate(madhab=madhab, estate=estate, heirs=heirs)
            elapsed_ms = round((time.perf_counter() - t0) * 1000, 3)
            logger.info(
                "calculation_finished",
                extra={"success": result.success, "elapsed_ms": elapsed_ms},
            )
        return CalculationOutcome(result=result, elapsed_ms=elapsed_ms, calculation_id=calculation_id)

    def compare(
        self,
        estate: Estate,
        heirs: HeirCounts | Mapping[Any, Any],
        madhabs: Sequence[str] | None = None,
    ) -> dict[str, CalculationOutcome]:
        """Run the same estate under several madhabs (all of them by default)."""
        ids = tuple(madhabs) if madhabs is not None else self._engine.rule_book.madhab_ids
        return {madhab: self.calculate(madhab, estate, heirs) for madhab in ids}
