"""
Rule Book Loader (``mirath_config.loader``).

Responsibility
--------------
Loads the madhab rule book YAML and parses it into typed
``mirath_config.schema`` dataclass instances.  Callers obtain the rule
book through ``mirath_config.get_rule_book()``; this module is the
tooling behind it.

Architecture position
---------------------
**Config layer** -- depends only on the kernel's heir enumeration and
exceptions.  It has no dependency on engines or services.

Invariants enforced
-------------------
* All parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required fields.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  source mapping.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown enum values or heir keys  -> ``ValueError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

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
from mirath_kernel.domain.heirs import HeirGroup, HeirKey


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _parse_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a boolean, got {value!r}")
    return value


def parse_madhab(madhab_id: str, data: dict[str, Any]) -> MadhabRules:
    """
    Parse one ``madhabs.<id>`` block.

    Raises:
        KeyError: if ``name``, ``arabic_name`` or ``rules`` is missing.
        ValueError: if a toggle has the wrong type or an unknown value.
    """
    rules = data["rules"]
    prefix = f"madhabs.{madhab_id}.rules"
    return MadhabRules(
        madhab_id=str(madhab_id).lower(),
        name=data["name"],
        arabic_name=data["arabic_name"],
        founder=data.get("founder", ""),
        description=data.get("description", ""),
        grandfather_with_siblings=GrandfatherPolicy(rules["grandfather_with_siblings"]),
        radd_to_spouse=_parse_bool(rules["radd_to_spouse"], f"{prefix}.radd_to_spouse"),
        radd_to_sole_spouse=_parse_bool(
            rules.get("radd_to_sole_spouse", True), f"{prefix}.radd_to_sole_spouse"
        ),
        blood_relatives_enabled=_parse_bool(
            rules["blood_relatives_enabled"], f"{prefix}.blood_relatives_enabled"
        ),
        musharraka_enabled=_parse_bool(rules["musharraka_enabled"], f"{prefix}.musharraka_enabled"),
        akdariyya_enabled=_parse_bool(
            rules.get("akdariyya_enabled", True), f"{prefix}.akdariyya_enabled"
        ),
        remainder_to_treasury=_parse_bool(
            rules.get("remainder_to_treasury", False), f"{prefix}.remainder_to_treasury"
        ),
        characteristics=tuple(data.get("characteristics", ())),
    )


def parse_heir(key: str, data: dict[str, Any]) -> HeirDefinition:
    """Parse one ``heirs.<key>`` entry (input categories only)."""
    heir_key = HeirKey.parse(key)
    if heir_key is None:
        raise ValueError(f"Unknown heir category in rule book: {key!r}")
    group = data.get("group")
    return HeirDefinition(
        key=heir_key,
        name=data["name"],
        arabic_name=data["arabic_name"],
        group=HeirGroup(group) if group is not None else None,
        max_count=data.get("max"),
        blood_class=data.get("blood_class"),
        description=data.get("description", ""),
    )


def parse_pooled_share(key: str, data: dict[str, Any]) -> HeirDefinition:
    """Parse one ``pooled_shares.<key>`` entry (synthetic share keys)."""
    heir_key = HeirKey(key)
    if heir_key.is_input:
        raise ValueError(f"{key!r} is an input heir category, not a pooled share")
    return HeirDefinition(key=heir_key, name=data["name"], arabic_name=data["arabic_name"])


def parse_special_case(case_type: str, data: dict[str, Any]) -> SpecialCaseDefinition:
    return SpecialCaseDefinition(
        case_type=case_type,
        name=data["name"],
        description=data.get("description", ""),
        reference=data.get("reference", "") or "",
    )


def parse_engine_options(data: dict[str, Any]) -> EngineOptions:
    cache = data.get("cache", {}) or {}
    return EngineOptions(
        spouse_conflict=SpouseConflictPolicy(data.get("spouse_conflict", "abort")),
        cache_capacity=cache.get("capacity", 100),
        cache_eviction=CacheEviction(cache.get("eviction", "fifo")),
    )


def parse_rule_book(data: dict[str, Any]) -> RuleBook:
    """
    Parse a complete rule book mapping.

    Postconditions:
        - Returns a ``RuleBook`` whose ``checksum`` is
          ``compute_checksum(data)``.
    """
    heirs = [parse_heir(k, v) for k, v in (data.get("heirs") or {}).items()]
    heirs.extend(parse_pooled_share(k, v) for k, v in (data.get("pooled_shares") or {}).items())
    return RuleBook(
        version=data.get("version", 1),
        madhabs=tuple(parse_madhab(k, v) for k, v in (data.get("madhabs") or {}).items()),
        heirs=tuple(heirs),
        special_cases=tuple(
            parse_special_case(k, v) for k, v in (data.get("special_cases") or {}).items()
        ),
        engine=parse_engine_options(data.get("engine") or {}),
        checksum=compute_checksum(data),
    )


def load_rule_book(path: Path) -> RuleBook:
    return parse_rule_book(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Returns a hex-encoded SHA-256 hash string.
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
