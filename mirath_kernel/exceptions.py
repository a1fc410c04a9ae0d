"""
Typed Exception Hierarchy for the Mirath Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

An inheritance computation fails for three very different reasons: the
caller supplied bad input, the estate has nothing left to distribute, or
the arithmetic itself broke.  Callers must be able to tell these apart
without parsing messages, so every error has:

  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Example:
    try:
        estate = normalize_estate(raw_estate)
    except NonPositiveEstateError as e:
        report(code=e.code, net=e.net_estate)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    MirathError (base)
    |
    +-- InputError
    |   +-- InputValidationError
    |   +-- UnknownMadhabError
    |   +-- UnknownHeirError
    |
    +-- EstateStateError
    |   +-- NonPositiveEstateError
    |
    +-- ComputationError
    |   +-- InvalidRationalValueError
    |   +-- RationalDivisionByZeroError
    |   +-- DuplicateShareError
    |
    +-- ConfigurationError
        +-- ConfigValidationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category      | Code                       | When Raised
--------------|----------------------------|------------------------------------------
Input         | INPUT_VALIDATION_FAILED    | Estate/heir fields rejected (Stages 1-2)
              | UNKNOWN_MADHAB             | Madhab id not in the rule book
              | UNKNOWN_HEIR               | Heir key outside the closed enumeration
--------------|----------------------------|------------------------------------------
Estate state  | NON_POSITIVE_ESTATE        | Total or net estate <= 0
--------------|----------------------------|------------------------------------------
Computation   | RATIONAL_INVALID_VALUE     | Non-finite/non-integral rational input
              | RATIONAL_DIVISION_BY_ZERO  | Division by a zero-valued Rational
              | DUPLICATE_SHARE            | Two stages recorded a share for one heir
--------------|----------------------------|------------------------------------------
Configuration | CONFIG_VALIDATION_FAILED   | Rule book YAML failed validation

===============================================================================
HANDLING PATTERNS
===============================================================================

The DistributionEngine converts InputError, EstateStateError and
ComputationError into a failure DistributionResult.  ConfigurationError is
a deployment fault and propagates to the caller.
"""


class MirathError(Exception):
    """
    Base exception for all mirath errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "MIRATH_ERROR"


# Input errors


class InputError(MirathError):
    """Base exception for rejected caller input."""

    code: str = "INPUT_ERROR"


class InputValidationError(InputError):
    """One or more estate or heir fields were rejected during normalization."""

    code: str = "INPUT_VALIDATION_FAILED"

    def __init__(self, errors: list[str] | tuple[str, ...]):
        self.errors = tuple(errors)
        super().__init__("Input validation failed: " + "; ".join(self.errors))


class UnknownMadhabError(InputError):
    """Madhab id is not present in the rule book."""

    code: str = "UNKNOWN_MADHAB"

    def __init__(self, madhab_id: str):
        self.madhab_id = madhab_id
        super().__init__(f"Unknown madhab: {madhab_id}")


class UnknownHeirError(InputError):
    """Heir key is not one of the recognised heir categories."""

    code: str = "UNKNOWN_HEIR"

    def __init__(self, heir_key: str):
        self.heir_key = heir_key
        super().__init__(f"Unknown heir category: {heir_key}")


# Estate state errors


class EstateStateError(MirathError):
    """Base exception for estates that cannot be distributed."""

    code: str = "ESTATE_STATE_ERROR"


class NonPositiveEstateError(EstateStateError):
    """Total estate, or the net estate after deductions, is zero or negative."""

    code: str = "NON_POSITIVE_ESTATE"

    def __init__(self, total: object, net_estate: object, message: str):
        self.total = total
        self.net_estate = net_estate
        super().__init__(message)


# Computation errors


class ComputationError(MirathError):
    """Base exception for internal arithmetic failures."""

    code: str = "COMPUTATION_ERROR"


class InvalidRationalValueError(ComputationError):
    """A Rational was constructed from a non-finite or non-integral value, or a zero denominator."""

    code: str = "RATIONAL_INVALID_VALUE"

    def __init__(self, numerator: object, denominator: object, reason: str):
        self.numerator = numerator
        self.denominator = denominator
        super().__init__(f"Invalid rational {numerator!r}/{denominator!r}: {reason}")


class RationalDivisionByZeroError(ComputationError):
    """Division by a zero-valued Rational."""

    code: str = "RATIONAL_DIVISION_BY_ZERO"

    def __init__(self, dividend: object):
        self.dividend = dividend
        super().__init__(f"Division by zero: {dividend} / 0")


class DuplicateShareError(ComputationError):
    """A pipeline stage recorded a second share line for the same heir."""

    code: str = "DUPLICATE_SHARE"

    def __init__(self, heir_key: str):
        self.heir_key = heir_key
        super().__init__(f"Share for {heir_key} already recorded")


# Configuration errors


class ConfigurationError(MirathError):
    """Base exception for rule book configuration faults."""

    code: str = "CONFIG_ERROR"


class ConfigValidationError(ConfigurationError):
    """The rule book failed structural validation."""

    code: str = "CONFIG_VALIDATION_FAILED"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = tuple(errors)
        super().__init__(
            f"Rule book {source} failed validation with {len(self.errors)} error(s): "
            + "; ".join(self.errors)
        )
