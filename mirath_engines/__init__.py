"""
Module: mirath_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    distribution pipeline.  This is the canonical import surface for
    higher layers (mirath_services, scripts).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import mirath_kernel and mirath_config.
    MUST NOT import mirath_services.

Invariants enforced:
    - Exact arithmetic: shares are Rational, money is Decimal; floats are
      never used in a computation.
    - Determinism: identical inputs always produce identical outputs.
    - Purity: engines never read the clock except for trace durations.

Audit relevance:
    Every ``DistributionEngine.calculate`` call is traced via the
    ``@traced_engine`` decorator (see ``mirath_engines.tracer``), emitting
    MIRATH_ENGINE_TRACE log records with engine name, version, input
    fingerprint, and duration.

Usage:
    from mirath_engines import DistributionEngine, ResultCache
    from mirath_engines.hijab import HIJAB_RULES
    from mirath_engines.asaba import RESIDUARY_CLASSES
"""

from mirath_engines.cache import CacheKey, ResultCache
from mirath_engines.context import DistributionContext
from mirath_engines.distribution import ENGINE_VERSION, DistributionEngine
from mirath_engines.normalization import (
    NormalizedInput,
    normalize_estate,
    normalize_heirs,
    normalize_input,
)
from mirath_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "DistributionEngine",
    "ENGINE_VERSION",
    "DistributionContext",
    "ResultCache",
    "CacheKey",
    "NormalizedInput",
    "normalize_estate",
    "normalize_heirs",
    "normalize_input",
    "traced_engine",
    "compute_input_fingerprint",
]
