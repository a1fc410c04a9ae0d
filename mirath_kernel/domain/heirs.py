"""
Heirs -- Closed heir-category enumeration and immutable head counts.

Responsibility:
    Defines every heir category the engine understands.  Input keys are
    the categories a caller may supply; synthetic keys only ever appear on
    share lines (pooled groups and the public treasury).

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - Heir keys outside the enumeration are unrepresentable
    - HeirCounts is immutable and only holds input keys with counts >= 0
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum


class HeirKey(str, Enum):
    """Heir categories."""

    # Spouses
    HUSBAND = "husband"
    WIFE = "wife"
    # Parents and grandparents
    FATHER = "father"
    MOTHER = "mother"
    GRANDFATHER = "grandfather"
    GRANDMOTHER_MOTHER = "grandmother_mother"  # mother's mother
    GRANDMOTHER_FATHER = "grandmother_father"  # father's mother
    # Descendants
    SON = "son"
    DAUGHTER = "daughter"
    GRANDSON = "grandson"  # son's son
    GRANDDAUGHTER = "granddaughter"  # son's daughter
    # Siblings
    FULL_BROTHER = "full_brother"
    FULL_SISTER = "full_sister"
    PATERNAL_BROTHER = "paternal_brother"
    PATERNAL_SISTER = "paternal_sister"
    MATERNAL_BROTHER = "maternal_brother"
    MATERNAL_SISTER = "maternal_sister"
    # Distant residuaries
    FULL_NEPHEW = "full_nephew"
    PATERNAL_NEPHEW = "paternal_nephew"
    FULL_UNCLE = "full_uncle"
    PATERNAL_UNCLE = "paternal_uncle"
    FULL_COUSIN = "full_cousin"
    PATERNAL_COUSIN = "paternal_cousin"
    # Blood relatives (dhawu al-arham)
    DAUGHTER_SON = "daughter_son"
    DAUGHTER_DAUGHTER = "daughter_daughter"
    SISTER_CHILDREN = "sister_children"
    MATERNAL_UNCLE = "maternal_uncle"
    MATERNAL_AUNT = "maternal_aunt"
    PATERNAL_AUNT = "paternal_aunt"
    # Synthetic share keys
    GRANDMOTHERS = "grandmothers"
    MATERNAL_SIBLINGS = "maternal_siblings"
    SHARED_SIBLINGS = "shared_siblings"
    TREASURY = "treasury"

    @property
    def is_input(self) -> bool:
        return self not in SYNTHETIC_KEYS

    @classmethod
    def parse(cls, value: str | HeirKey) -> HeirKey | None:
        """Resolve a caller-supplied key, or None if it is not an input category."""
        if isinstance(value, HeirKey):
            return value if value.is_input else None
        try:
            key = cls(str(value).strip().lower())
        except ValueError:
            return None
        return key if key.is_input else None


SYNTHETIC_KEYS: frozenset[HeirKey] = frozenset({
    HeirKey.GRANDMOTHERS,
    HeirKey.MATERNAL_SIBLINGS,
    HeirKey.SHARED_SIBLINGS,
    HeirKey.TREASURY,
})

INPUT_HEIRS: tuple[HeirKey, ...] = tuple(k for k in HeirKey if k not in SYNTHETIC_KEYS)

SPOUSES: tuple[HeirKey, ...] = (HeirKey.HUSBAND, HeirKey.WIFE)

DESCENDANTS: tuple[HeirKey, ...] = (
    HeirKey.SON,
    HeirKey.DAUGHTER,
    HeirKey.GRANDSON,
    HeirKey.GRANDDAUGHTER,
)

FULL_AND_PATERNAL_SIBLINGS: tuple[HeirKey, ...] = (
    HeirKey.FULL_BROTHER,
    HeirKey.FULL_SISTER,
    HeirKey.PATERNAL_BROTHER,
    HeirKey.PATERNAL_SISTER,
)

MATERNAL_SIBLINGS: tuple[HeirKey, ...] = (HeirKey.MATERNAL_BROTHER, HeirKey.MATERNAL_SISTER)

# Nearest first; each category excludes every one after it.
DISTANT_RESIDUARIES: tuple[HeirKey, ...] = (
    HeirKey.FULL_NEPHEW,
    HeirKey.PATERNAL_NEPHEW,
    HeirKey.FULL_UNCLE,
    HeirKey.PATERNAL_UNCLE,
    HeirKey.FULL_COUSIN,
    HeirKey.PATERNAL_COUSIN,
)


class HeirGroup(str, Enum):
    """Display grouping of input heir categories."""

    SPOUSES = "spouses"
    PARENTS = "parents"
    CHILDREN = "children"
    SIBLINGS = "siblings"
    EXTENDED = "extended"
    BLOOD_RELATIVES = "blood_relatives"


class HeirCounts(Mapping[HeirKey, int]):
    """
    Immutable mapping of input heir category to head count.

    Contract:
        Every key is an input HeirKey; every value is an int >= 0.
        Missing keys read as 0.

    Non-goals:
        - Does NOT clamp or validate legal maxima; normalization does that.
    """

    __slots__ = ("_counts",)

    def __init__(self, counts: Mapping[HeirKey, int] | None = None):
        cleaned: dict[HeirKey, int] = {}
        for key, value in (counts or {}).items():
            if not isinstance(key, HeirKey) or not key.is_input:
                raise ValueError(f"Not an input heir category: {key!r}")
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Heir count must be a non-negative int: {key.value}={value!r}")
            cleaned[key] = value
        self._counts = cleaned

    @classmethod
    def of(cls, **counts: int) -> HeirCounts:
        """Convenience constructor: HeirCounts.of(husband=1, mother=1)."""
        return cls({HeirKey(k): v for k, v in counts.items()})

    def __getitem__(self, key: HeirKey) -> int:
        return self._counts.get(key, 0)

    def __iter__(self) -> Iterator[HeirKey]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeirCounts):
            return NotImplemented
        return self.present() == other.present()

    def __hash__(self) -> int:
        return hash(self.present())

    def __repr__(self) -> str:
        inner = ", ".join(f"{k.value}={v}" for k, v in self.present())
        return f"HeirCounts({inner})"

    def present(self) -> tuple[tuple[HeirKey, int], ...]:
        """Non-zero counts in enumeration order; the canonical serialized form."""
        return tuple((k, self._counts[k]) for k in INPUT_HEIRS if self._counts.get(k, 0) > 0)

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def to_dict(self) -> dict[str, int]:
        return {k.value: v for k, v in self.present()}
