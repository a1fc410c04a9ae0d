"""Tests for heir keys and immutable heir counts."""

import pytest

from mirath_kernel.domain.heirs import (
    DISTANT_RESIDUARIES,
    INPUT_HEIRS,
    SYNTHETIC_KEYS,
    HeirCounts,
    HeirKey,
)


class TestHeirKey:
    def test_twenty_nine_input_categories(self):
        assert len(INPUT_HEIRS) == 29

    def test_synthetic_keys_are_not_inputs(self):
        for key in SYNTHETIC_KEYS:
            assert not key.is_input

    def test_parse_normalizes_case_and_whitespace(self):
        assert HeirKey.parse("  Husband ") is HeirKey.HUSBAND

    def test_parse_rejects_unknown(self):
        assert HeirKey.parse("cousin_twice_removed") is None

    def test_parse_rejects_synthetic(self):
        assert HeirKey.parse("treasury") is None
        assert HeirKey.parse(HeirKey.GRANDMOTHERS) is None

    def test_distant_tier_is_ordered_nearest_first(self):
        assert DISTANT_RESIDUARIES[0] is HeirKey.FULL_NEPHEW
        assert DISTANT_RESIDUARIES[-1] is HeirKey.PATERNAL_COUSIN


class TestHeirCounts:
    def test_missing_keys_read_as_zero(self):
        counts = HeirCounts.of(son=2)
        assert counts[HeirKey.DAUGHTER] == 0

    def test_present_is_in_enumeration_order(self):
        counts = HeirCounts.of(son=1, husband=1, mother=1)
        assert [k for k, _ in counts.present()] == [HeirKey.HUSBAND, HeirKey.MOTHER, HeirKey.SON]

    def test_present_drops_zero_counts(self):
        counts = HeirCounts.of(son=1, daughter=0)
        assert counts.to_dict() == {"son": 1}

    def test_equality_ignores_zero_entries(self):
        assert HeirCounts.of(son=1, daughter=0) == HeirCounts.of(son=1)
        assert hash(HeirCounts.of(son=1, daughter=0)) == hash(HeirCounts.of(son=1))

    def test_total(self):
        assert HeirCounts.of(wife=2, son=3).total == 5

    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="non-negative"):
            HeirCounts.of(son=-1)

    def test_rejects_synthetic_key(self):
        with pytest.raises(ValueError, match="input heir"):
            HeirCounts({HeirKey.TREASURY: 1})

    def test_rejects_string_keys(self):
        with pytest.raises(ValueError):
            HeirCounts({"son": 1})
