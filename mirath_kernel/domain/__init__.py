"""
Pure domain layer.

This module contains pure value objects and domain logic
with NO dependencies on:
- Configuration files
- Time/clock
- I/O

All domain objects except the per-run ShareRecord are immutable and
deterministic.
"""

from mirath_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from mirath_kernel.domain.heirs import (
    DESCENDANTS,
    DISTANT_RESIDUARIES,
    FULL_AND_PATERNAL_SIBLINGS,
    INPUT_HEIRS,
    MATERNAL_SIBLINGS,
    SPOUSES,
    SYNTHETIC_KEYS,
    HeirCounts,
    HeirGroup,
    HeirKey,
)
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import (
    BlockedHeir,
    CalculationStep,
    DistributionResult,
    SpecialCase,
    SpecialCaseType,
    StepLevel,
)
from mirath_kernel.domain.share import ShareClassification, ShareLine, ShareRecord
from mirath_kernel.domain.values import Estate, NormalizedEstate

__all__ = [
    # Value objects
    "Rational",
    "Estate",
    "NormalizedEstate",
    "CurrencyInfo",
    "CurrencyRegistry",
    # Heirs
    "HeirKey",
    "HeirGroup",
    "HeirCounts",
    "INPUT_HEIRS",
    "SYNTHETIC_KEYS",
    "SPOUSES",
    "DESCENDANTS",
    "FULL_AND_PATERNAL_SIBLINGS",
    "MATERNAL_SIBLINGS",
    "DISTANT_RESIDUARIES",
    # Shares
    "ShareClassification",
    "ShareRecord",
    "ShareLine",
    # Results
    "StepLevel",
    "SpecialCaseType",
    "CalculationStep",
    "SpecialCase",
    "BlockedHeir",
    "DistributionResult",
]
