"""
Rational -- Exact signed fraction value object.

Responsibility:
    Provides the exact arithmetic primitive used by every stage of the
    distribution pipeline.  Shares are never represented as floats; a
    problem's common base (asl) is derived from the denominators of
    Rational values.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - denominator > 0; the sign always lives on the numerator
    - gcd(|numerator|, denominator) == 1 after every construction
    - magnitudes beyond 10**12 are rescaled to a bounded decimal
      approximation over a denominator of at most 10**9

Failure modes:
    - InvalidRationalValueError on non-finite, non-integral or zero-denominator input
    - RationalDivisionByZeroError when dividing by a zero-valued Rational
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from mirath_kernel.exceptions import (
    InvalidRationalValueError,
    RationalDivisionByZeroError,
)

_MAGNITUDE_LIMIT = 10**12
_RESCALE_DENOMINATOR = 10**9

_ARABIC_DIGITS = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")

_FRACTION_GLYPHS: dict[tuple[int, int], str] = {
    (1, 2): "½",
    (1, 3): "⅓",
    (2, 3): "⅔",
    (1, 4): "¼",
    (3, 4): "¾",
    (1, 6): "⅙",
    (5, 6): "⅚",
    (1, 8): "⅛",
    (3, 8): "⅜",
    (5, 8): "⅝",
    (7, 8): "⅞",
}


def _as_integer(value: Any, numerator: Any, denominator: Any) -> int:
    if isinstance(value, int):
        return int(value)
    if isinstance(value, (float, Decimal)):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidRationalValueError(numerator, denominator, "value is not finite")
        if isinstance(value, Decimal) and not value.is_finite():
            raise InvalidRationalValueError(numerator, denominator, "value is not finite")
        if value != int(value):
            raise InvalidRationalValueError(numerator, denominator, "value is not integral")
        return int(value)
    raise InvalidRationalValueError(numerator, denominator, f"unsupported type {type(value).__name__}")


def _round_half_away(numerator: int, denominator: int) -> int:
    quotient, rest = divmod(abs(numerator), denominator)
    if 2 * rest >= denominator:
        quotient += 1
    return quotient if numerator >= 0 else -quotient


@dataclass(frozen=True, slots=True)
class Rational:
    """
    Exact rational number.

    Contract:
        Constructed from integral numerator/denominator; always stored
        reduced with a positive denominator.

    Guarantees:
        - Immutable and hashable
        - Arithmetic with Rational or int operands is exact
        - Equal values have equal (numerator, denominator) pairs

    Non-goals:
        - Does NOT accept non-integral floats; convert explicitly first
    """

    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        num = _as_integer(self.numerator, self.numerator, self.denominator)
        den = _as_integer(self.denominator, self.numerator, self.denominator)
        if den == 0:
            raise InvalidRationalValueError(self.numerator, self.denominator, "zero denominator")

        if den < 0:
            num, den = -num, -den

        g = Rational.gcd(num, den)
        num, den = num // g, den // g

        if abs(num) > _MAGNITUDE_LIMIT or den > _MAGNITUDE_LIMIT:
            num = _round_half_away(num * _RESCALE_DENOMINATOR, den)
            den = _RESCALE_DENOMINATOR
            g = Rational.gcd(num, den)
            num, den = num // g, den // g

        object.__setattr__(self, "numerator", num)
        object.__setattr__(self, "denominator", den)

    @classmethod
    def of(cls, numerator: int, denominator: int = 1) -> Rational:
        """Factory mirroring Money.of for call-site symmetry."""
        return cls(numerator, denominator)

    # ------------------------------------------------------------------
    # Number theory helpers
    # ------------------------------------------------------------------

    @staticmethod
    def gcd(a: int, b: int) -> int:
        """Greatest common divisor of |a| and |b|; 1 when both are zero."""
        return math.gcd(a, b) or 1

    @staticmethod
    def lcm(a: int, b: int) -> int:
        """Least common multiple of |a| and |b|; 0 when either is zero."""
        if a == 0 or b == 0:
            return 0
        return abs(a * b) // math.gcd(a, b)

    @staticmethod
    def lcm_of(values: Iterable[int]) -> int:
        """LCM over the positive integers in ``values``; 1 if there are none."""
        result = 1
        for value in values:
            if value > 0:
                result = Rational.lcm(result, value)
        return result

    @staticmethod
    def lcm_of_denominators(fractions: Iterable[Rational]) -> int:
        """Common base of the non-zero fractions (the asl of a problem)."""
        return Rational.lcm_of(f.denominator for f in fractions if not f.is_zero)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    @property
    def is_positive(self) -> bool:
        return self.numerator > 0

    @property
    def is_negative(self) -> bool:
        return self.numerator < 0

    @property
    def is_one(self) -> bool:
        return self.numerator == self.denominator

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(other: Any) -> Rational | None:
        if isinstance(other, Rational):
            return other
        if isinstance(other, int):
            return Rational(other)
        return None

    def __add__(self, other: Rational | int) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Rational(
            self.numerator * o.denominator + o.numerator * self.denominator,
            self.denominator * o.denominator,
        )

    def __radd__(self, other: int) -> Rational:
        return self.__add__(other)

    def __sub__(self, other: Rational | int) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Rational(
            self.numerator * o.denominator - o.numerator * self.denominator,
            self.denominator * o.denominator,
        )

    def __rsub__(self, other: int) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o.__sub__(self)

    def __mul__(self, other: Rational | int) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Rational(self.numerator * o.numerator, self.denominator * o.denominator)

    def __rmul__(self, other: int) -> Rational:
        return self.__mul__(other)

    def __truediv__(self, other: Rational | int) -> Rational:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        if o.is_zero:
            raise RationalDivisionByZeroError(self)
        return Rational(self.numerator * o.denominator, self.denominator * o.numerator)

    def __neg__(self) -> Rational:
        return Rational(-self.numerator, self.denominator)

    def __abs__(self) -> Rational:
        return Rational(abs(self.numerator), self.denominator)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare_to(self, other: Rational | int) -> int:
        """Negative, zero or positive as self is less than, equal to or greater than other."""
        o = self._coerce(other)
        if o is None:
            raise TypeError(f"Cannot compare Rational with {type(other).__name__}")
        return self.numerator * o.denominator - o.numerator * self.denominator

    def __eq__(self, other: object) -> bool:
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self.numerator == o.numerator and self.denominator == o.denominator

    def __hash__(self) -> int:
        return hash((self.numerator, self.denominator))

    def __lt__(self, other: Rational | int) -> bool:
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: Rational | int) -> bool:
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: Rational | int) -> bool:
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: Rational | int) -> bool:
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) >= 0

    # ------------------------------------------------------------------
    # Conversion and display
    # ------------------------------------------------------------------

    def to_decimal(self) -> Decimal:
        return Decimal(self.numerator) / Decimal(self.denominator)

    def per_person(self, count: int) -> Rational:
        """Share of a single head when this fraction is split across ``count`` heads."""
        if count <= 0:
            return Rational.ZERO
        return Rational(self.numerator, self.denominator * count)

    def to_percentage(self) -> str:
        return f"{(self.to_decimal() * 100).quantize(Decimal('0.01'))}%"

    def to_arabic(self) -> str:
        """Render with Arabic-Indic digits, using vulgar-fraction glyphs where one exists."""
        if self.numerator == 0:
            return "٠"
        sign = "-" if self.numerator < 0 else ""
        num = abs(self.numerator)
        if self.denominator == 1:
            return sign + str(num).translate(_ARABIC_DIGITS)
        glyph = _FRACTION_GLYPHS.get((num, self.denominator))
        if glyph:
            return sign + glyph
        return (
            sign
            + str(num).translate(_ARABIC_DIGITS)
            + "/"
            + str(self.denominator).translate(_ARABIC_DIGITS)
        )

    def __str__(self) -> str:
        if self.numerator == 0:
            return "0"
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"

    def __repr__(self) -> str:
        return f"Rational({self.numerator}, {self.denominator})"


Rational.ZERO = Rational(0)
Rational.ONE = Rational(1)
Rational.HALF = Rational(1, 2)
Rational.THIRD = Rational(1, 3)
Rational.QUARTER = Rational(1, 4)
Rational.SIXTH = Rational(1, 6)
Rational.EIGHTH = Rational(1, 8)
Rational.TWO_THIRDS = Rational(2, 3)
