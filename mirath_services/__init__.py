"""
mirath_services -- Package init and public API.

Responsibility:
    Caller-side orchestration over the pure engines: owns the result
    cache, mints calculation ids and measures wall-clock time.

Architecture position:
    Services -- stateful orchestration over engines + kernel.

        mirath_services/ -> mirath_engines/  (allowed)
        mirath_services/ -> mirath_kernel/   (allowed)
        mirath_engines/  -> mirath_services/ (FORBIDDEN)
        mirath_kernel/   -> mirath_services/ (FORBIDDEN)
"""

from mirath_services.inheritance_service import CalculationOutcome, InheritanceService

__all__ = [
    "CalculationOutcome",
    "InheritanceService",
]
