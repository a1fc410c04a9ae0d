"""
Rule book schema.

Defines the human-authored, reviewable source artifact for madhab
configuration.  YAML is parsed into these types by the loader, checked
by the validator and handed to engines as a frozen ``RuleBook``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from mirath_kernel.domain.heirs import HeirGroup, HeirKey
from mirath_kernel.exceptions import UnknownMadhabError

# ---------------------------------------------------------------------------
# Policy enums
# ---------------------------------------------------------------------------


class GrandfatherPolicy(str, Enum):
    """How the grandfather treats full and paternal siblings."""

    BLOCKS = "blocks"
    SHARES = "shares"


class SpouseConflictPolicy(str, Enum):
    """What to do when both husband and wife are supplied."""

    ABORT = "abort"
    DROP_WIFE = "drop_wife"


class CacheEviction(str, Enum):
    FIFO = "fifo"
    LRU = "lru"


# ---------------------------------------------------------------------------
# Madhab rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MadhabRules:
    """
    Policy toggles for one madhab.

    The engine consults only these fields; no madhab id is ever compared
    in engine code.
    """

    madhab_id: str
    name: str
    arabic_name: str
    founder: str = ""
    description: str = ""
    grandfather_with_siblings: GrandfatherPolicy = GrandfatherPolicy.BLOCKS
    radd_to_spouse: bool = False
    radd_to_sole_spouse: bool = True
    blood_relatives_enabled: bool = True
    musharraka_enabled: bool = False
    akdariyya_enabled: bool = True
    remainder_to_treasury: bool = False
    characteristics: tuple[str, ...] = ()

    @property
    def grandfather_shares(self) -> bool:
        return self.grandfather_with_siblings is GrandfatherPolicy.SHARES


# ---------------------------------------------------------------------------
# Heir metadata
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeirDefinition:
    """Display and constraint metadata for one heir category."""

    key: HeirKey
    name: str
    arabic_name: str
    group: HeirGroup | None = None
    max_count: int | None = None  # None = unbounded
    blood_class: int | None = None
    description: str = ""


@dataclass(frozen=True)
class SpecialCaseDefinition:
    """Catalogue text for a detected special case."""

    case_type: str
    name: str
    description: str
    reference: str = ""


@dataclass(frozen=True)
class EngineOptions:
    spouse_conflict: SpouseConflictPolicy = SpouseConflictPolicy.ABORT
    cache_capacity: int = 100
    cache_eviction: CacheEviction = CacheEviction.FIFO


# ---------------------------------------------------------------------------
# Root artifact
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleBook:
    """
    The complete, validated rule book.

    Guarantees:
        - Immutable; ``checksum`` identifies the exact source it was built from
        - Every input heir category has a definition
    """

    version: int
    madhabs: tuple[MadhabRules, ...]
    heirs: tuple[HeirDefinition, ...]
    special_cases: tuple[SpecialCaseDefinition, ...]
    engine: EngineOptions = field(default_factory=EngineOptions)
    checksum: str = ""

    def madhab(self, madhab_id: str) -> MadhabRules:
        """Rules for ``madhab_id``; raises UnknownMadhabError if absent."""
        wanted = str(madhab_id).strip().lower()
        for rules in self.madhabs:
            if rules.madhab_id == wanted:
                return rules
        raise UnknownMadhabError(str(madhab_id))

    @property
    def madhab_ids(self) -> tuple[str, ...]:
        return tuple(m.madhab_id for m in self.madhabs)

    def heir(self, key: HeirKey) -> HeirDefinition | None:
        for definition in self.heirs:
            if definition.key == key:
                return definition
        return None

    def heir_name(self, key: HeirKey) -> str:
        definition = self.heir(key)
        return definition.arabic_name if definition is not None else key.value

    def max_count(self, key: HeirKey) -> int | None:
        definition = self.heir(key)
        return definition.max_count if definition is not None else None

    def group_members(self, group: HeirGroup) -> tuple[HeirKey, ...]:
        return tuple(d.key for d in self.heirs if d.group == group)

    def blood_classes(self) -> tuple[tuple[int, tuple[HeirKey, ...]], ...]:
        """Blood-relative priority classes, nearest first."""
        classes: dict[int, list[HeirKey]] = {}
        for definition in self.heirs:
            if definition.blood_class is not None:
                classes.setdefault(definition.blood_class, []).append(definition.key)
        return tuple((rank, tuple(keys)) for rank, keys in sorted(classes.items()))

    def special_case(self, case_type: str) -> SpecialCaseDefinition | None:
        for definition in self.special_cases:
            if definition.case_type == case_type:
                return definition
        return None
