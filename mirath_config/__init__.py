"""
mirath_config -- single public entrypoint for madhab configuration.

Responsibility:
    Provides the ONLY way to obtain the rule book at runtime through
    ``get_rule_book()``.  Engines never read YAML or compare madhab ids
    themselves; every policy toggle reaches them via ``MadhabRules``.

Architecture position:
    Configuration -- YAML-driven rule book, load-time validation.
    This package sits above ``mirath_kernel`` and below
    ``mirath_engines`` / ``mirath_services``.  The kernel MUST NEVER
    import from ``mirath_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_rule_book()``.
    - Load-time validation: the rule book must pass structural validation
      before it is returned.
    - Deterministic identity: the same YAML always produces the same
      ``RuleBook.checksum``.

Failure modes:
    - ``FileNotFoundError`` -- the rule book file does not exist.
    - ``ConfigValidationError`` -- parse or structural validation failures.

Audit relevance:
    Every successful ``get_rule_book()`` call emits a
    ``MIRATH_CONFIG_TRACE`` log entry containing the source path,
    version, checksum and madhab ids, tying each distribution back to
    the exact rule book that governed it.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from mirath_config.loader import load_yaml_file, parse_rule_book
from mirath_config.schema import (
    CacheEviction,
    EngineOptions,
    GrandfatherPolicy,
    HeirDefinition,
    MadhabRules,
    RuleBook,
    SpecialCaseDefinition,
    SpouseConflictPolicy,
)
from mirath_config.validator import validate_rule_book
from mirath_kernel.exceptions import ConfigValidationError
from mirath_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_RULE_BOOK = Path(__file__).parent / "sets" / "madhabs.yaml"


def get_rule_book(config_path: Path | str | None = None) -> RuleBook:
    """The ONLY public configuration entrypoint.

    Guarantees:
        - The returned ``RuleBook`` has passed structural validation.
        - A ``MIRATH_CONFIG_TRACE`` log entry is emitted on every
          successful call.

    Non-goals:
        - Does NOT cache rule books across calls; engines hold the
          returned book for their lifetime.

    Args:
        config_path: Override path to the rule book YAML.  Defaults to
            mirath_config/sets/madhabs.yaml.

    Raises:
        FileNotFoundError: If the rule book file does not exist.
        ConfigValidationError: If the file cannot be parsed into a rule
            book or fails validation.
    """
    path = Path(config_path) if config_path is not None else _DEFAULT_RULE_BOOK

    try:
        book = parse_rule_book(load_yaml_file(path))
    except (KeyError, ValueError, TypeError, AttributeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(str(path), [f"{type(exc).__name__}: {exc}"]) from exc

    validation = validate_rule_book(book)
    for warning in validation.warnings:
        _logger.warning("rule_book_warning", extra={"source": str(path), "detail": warning})
    if not validation.is_valid:
        raise ConfigValidationError(str(path), validation.errors)

    _logger.info(
        "MIRATH_CONFIG_TRACE",
        extra={
            "trace_type": "MIRATH_CONFIG_TRACE",
            "source": str(path),
            "version": book.version,
            "checksum": book.checksum,
            "madhabs": list(book.madhab_ids),
            "heir_count": len(book.heirs),
        },
    )
    return book


__all__ = [
    "get_rule_book",
    "RuleBook",
    "MadhabRules",
    "HeirDefinition",
    "SpecialCaseDefinition",
    "EngineOptions",
    "GrandfatherPolicy",
    "SpouseConflictPolicy",
    "CacheEviction",
]
