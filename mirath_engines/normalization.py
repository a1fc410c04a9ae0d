"""
Module: mirath_engines.normalization
Responsibility:
    Stages 1 and 2 of the distribution pipeline: turn caller-supplied
    estate amounts and heir counts into a ``NormalizedEstate`` and a
    clean ``HeirCounts``, collecting every problem before aborting.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Deductions are clamped to >= 0 and applied in order funeral, debts,
      will; the will never exceeds one third of what remains (rounded down)
    - net estate > 0 on success
    - Heir counts are non-negative integers within the rule book maxima
    - Husband and wife are never both present on success

Failure modes:
    - InputValidationError listing every rejected field
    - NonPositiveEstateError when total or net estate is <= 0
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from mirath_config.schema import RuleBook, SpouseConflictPolicy
from mirath_kernel.domain.currency import CurrencyRegistry
from mirath_kernel.domain.heirs import INPUT_HEIRS, HeirCounts, HeirKey
from mirath_kernel.domain.values import Estate, NormalizedEstate
from mirath_kernel.exceptions import InputValidationError, NonPositiveEstateError
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.normalization")

SPOUSE_CONFLICT_MESSAGE = "husband and wife cannot both be present; wife count set to 0"


@dataclass(frozen=True)
class NormalizedInput:
    """Output of stages 1-2."""

    estate: NormalizedEstate
    heirs: HeirCounts
    warnings: tuple[str, ...] = ()


def _to_decimal(value: Any) -> Decimal | None:
    """Decimal for numeric-ish input, None if it cannot be read as a finite number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def _quantize(value: Decimal, minor: Decimal) -> Decimal | None:
    """``value`` rounded half-up to ``minor``, None if that needs more digits than the context holds."""
    try:
        return value.quantize(minor, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def normalize_estate(estate: Estate) -> tuple[NormalizedEstate, list[str]]:
    """
    Stage 1: validate and clip the estate.

    Returns:
        The normalized estate and the warnings produced by clamping or clipping.

    Raises:
        InputValidationError: non-numeric, non-finite or over-precise amounts,
            a non-string or unknown currency.
        NonPositiveEstateError: total <= 0 or nothing left after deductions.
    """
    errors: list[str] = []
    warnings: list[str] = []

    currency: str | None = CurrencyRegistry.DEFAULT_CODE
    if estate.currency is not None and not isinstance(estate.currency, str):
        errors.append(f"currency must be an ISO 4217 code string, got {estate.currency!r}")
        currency = None
    elif estate.currency:
        currency = estate.currency.upper().strip()
        if not CurrencyRegistry.is_valid(currency):
            errors.append(f"unknown currency code: {estate.currency}")
            currency = None

    # amounts are still checked for precision when the currency was rejected
    minor = CurrencyRegistry.get_minor_unit(currency or CurrencyRegistry.DEFAULT_CODE)
    amounts: dict[str, Decimal] = {}
    for name in ("total", "funeral", "debts", "will"):
        raw = getattr(estate, name)
        parsed = _to_decimal(raw)
        if parsed is None:
            errors.append(f"{name} must be a finite number, got {raw!r}")
            continue
        quantized = _quantize(parsed, minor)
        if quantized is None:
            errors.append(f"{name} {raw!r} exceeds the supported precision")
            continue
        amounts[name] = quantized

    if errors:
        raise InputValidationError(errors)
    assert currency is not None

    total = amounts["total"]
    if total <= 0:
        raise NonPositiveEstateError(total, None, f"total estate must be positive, got {total}")

    deductions: dict[str, Decimal] = {}
    for name in ("funeral", "debts", "will"):
        value = amounts[name]
        if value < 0:
            warnings.append(f"{name} was negative ({value}); treated as 0")
            value = Decimal(0).quantize(minor)
        deductions[name] = value

    funeral = deductions["funeral"]
    if funeral > total:
        warnings.append(f"funeral costs {funeral} exceed the estate; clipped to {total}")
        funeral = total

    debts = deductions["debts"]
    after_funeral = total - funeral
    if debts > after_funeral:
        warnings.append(f"debts {debts} exceed the estate after funeral costs; clipped to {after_funeral}")
        debts = after_funeral

    will = deductions["will"]
    will_limit = ((total - funeral - debts) / 3).quantize(minor, rounding=ROUND_DOWN)
    if will > will_limit:
        warnings.append(f"bequest {will} exceeds one third of the estate; clipped to {will_limit}")
        will = will_limit

    normalized = NormalizedEstate(
        total=total, funeral=funeral, debts=debts, will=will, currency=currency
    )
    if normalized.net_estate <= 0:
        raise NonPositiveEstateError(
            total,
            normalized.net_estate,
            f"nothing remains to distribute after deductions (net estate {normalized.net_estate})",
        )
    return normalized, warnings


def _to_count(value: Any) -> int | None:
    parsed = _to_decimal(value)
    if parsed is None:
        return None
    return int(parsed.to_integral_value(rounding=ROUND_FLOOR))


def normalize_heirs(
    heirs: HeirCounts | Mapping[Any, Any],
    book: RuleBook,
) -> tuple[HeirCounts, list[str]]:
    """
    Stage 2: validate heir counts against the rule book.

    Returns:
        Clean counts and the warnings produced by clamping.

    Raises:
        InputValidationError: unknown heir keys, non-numeric counts, or a
            husband/wife conflict under the ``abort`` policy.
    """
    errors: list[str] = []
    warnings: list[str] = []
    counts: dict[HeirKey, int] = {}

    for raw_key, raw_value in heirs.items():
        key = HeirKey.parse(raw_key)
        if key is None:
            errors.append(f"unknown heir category: {raw_key}")
            continue
        count = _to_count(raw_value)
        if count is None:
            errors.append(f"count for {key.value} must be a finite number, got {raw_value!r}")
            continue
        if count < 0:
            warnings.append(f"count for {key.value} was negative; treated as 0")
            count = 0
        limit = book.max_count(key)
        if limit is not None and count > limit:
            warnings.append(f"count for {key.value} exceeds the maximum of {limit}; clipped")
            count = limit
        counts[key] = count

    if counts.get(HeirKey.HUSBAND, 0) > 0 and counts.get(HeirKey.WIFE, 0) > 0:
        counts[HeirKey.WIFE] = 0
        if book.engine.spouse_conflict is SpouseConflictPolicy.ABORT:
            errors.append(SPOUSE_CONFLICT_MESSAGE)
        else:
            warnings.append(SPOUSE_CONFLICT_MESSAGE)
        logger.warning(
            "spouse_conflict",
            extra={"policy": book.engine.spouse_conflict.value},
        )

    if errors:
        raise InputValidationError(errors)

    return HeirCounts({k: counts[k] for k in INPUT_HEIRS if counts.get(k, 0) > 0}), warnings


def normalize_input(
    estate: Estate,
    heirs: HeirCounts | Mapping[Any, Any],
    book: RuleBook,
) -> NormalizedInput:
    """
    Stages 1 and 2 together.

    Input errors from both stages are reported in one InputValidationError.
    A non-positive estate aborts immediately.
    """
    errors: list[str] = []
    warnings: list[str] = []

    normalized_estate: NormalizedEstate | None = None
    try:
        normalized_estate, estate_warnings = normalize_estate(estate)
        warnings.extend(estate_warnings)
    except InputValidationError as exc:
        errors.extend(exc.errors)

    normalized_heirs: HeirCounts | None = None
    try:
        normalized_heirs, heir_warnings = normalize_heirs(heirs, book)
        warnings.extend(heir_warnings)
    except InputValidationError as exc:
        errors.extend(exc.errors)

    if errors:
        raise InputValidationError(errors)

    assert normalized_estate is not None and normalized_heirs is not None
    return NormalizedInput(
        estate=normalized_estate, heirs=normalized_heirs, warnings=tuple(warnings)
    )
