"""
End-to-end tests for DistributionEngine.calculate.

Covers:
- Reference problems (umariyyah, awl, exclusion by a son, treasury)
- Failure results for bad input, unknown madhab and empty estates
- Result shape: bases, amounts, steps, serialization
- Global properties: fractions sum to one, blocked heirs hold nothing,
  identical inputs give equal results
"""

import json
from decimal import Decimal, InvalidOperation
from unittest.mock import patch

import pytest

from mirath_engines.distribution import DistributionEngine
from mirath_kernel.domain import Estate, HeirCounts, HeirKey
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import SpecialCaseType, StepLevel
from mirath_kernel.domain.share import ShareClassification
from mirath_kernel.exceptions import InvalidRationalValueError

R = Rational
ESTATE = Estate(total=120000)


def _fractions(result):
    return {line.heir_key.value: line.fraction for line in result.shares}


class TestReferenceProblems:
    """Well-known problems with settled answers."""

    def test_umariyyah_with_husband(self, engine):
        result = engine.calculate(
            madhab="shafii", estate=ESTATE, heirs={"husband": 1, "father": 1, "mother": 1}
        )
        assert result.success
        assert _fractions(result) == {"husband": R(1, 2), "father": R(1, 3), "mother": R(1, 6)}
        assert result.share("husband").amount == Decimal("60000.00")
        assert result.share("father").amount == Decimal("40000.00")
        assert result.share("mother").amount == Decimal("20000.00")
        assert result.has_special_case(SpecialCaseType.UMARIYYAH)

    def test_awl_husband_two_sisters_mother(self, engine):
        result = engine.calculate(
            madhab="shafii", estate=ESTATE, heirs={"husband": 1, "full_sister": 2, "mother": 1}
        )
        assert result.awl_applied
        assert (result.asl, result.final_base) == (6, 8)
        assert _fractions(result) == {"husband": R(3, 8), "full_sister": R(4, 8), "mother": R(1, 8)}
        assert result.share("full_sister").multiplicity == 2
        assert result.share("full_sister").amount_per_person == Decimal("30000.00")
        assert result.confidence == Decimal("0.9800")

    def test_son_excludes_siblings(self, engine):
        result = engine.calculate(
            madhab="shafii", estate=ESTATE, heirs={"son": 1, "full_brother": 2, "full_sister": 1}
        )
        assert _fractions(result) == {"son": R(1)}
        assert result.share("son").amount == Decimal("120000.00")
        assert result.is_blocked("full_brother")
        assert result.is_blocked("full_sister")

    def test_maliki_treasury(self, engine):
        result = engine.calculate(madhab="maliki", estate=ESTATE, heirs={"maternal_uncle": 1})
        assert _fractions(result) == {"treasury": R(1)}

    def test_wife_mother_father_son_daughter(self, engine):
        result = engine.calculate(
            madhab="hanafi",
            estate=Estate(total=72000),
            heirs={"wife": 1, "father": 1, "mother": 1, "son": 1, "daughter": 1},
        )
        assert _fractions(result) == {
            "wife": R(1, 8),
            "mother": R(1, 6),
            "father": R(1, 6),
            "son": R(13, 36),
            "daughter": R(13, 72),
        }
        assert result.asl == 24
        assert result.corrected_base == 72
        assert result.share("son").base_shares == 26
        assert result.amount_sum == Decimal("72000.00")


class TestFailures:
    def test_unknown_madhab(self, engine):
        result = engine.calculate(madhab="zahiri", estate=ESTATE, heirs={"son": 1})
        assert not result.success
        assert result.error_code == "UNKNOWN_MADHAB"
        assert result.errors == ("Unknown madhab: zahiri",)
        assert result.shares == ()

    def test_invalid_input_lists_every_error(self, engine):
        result = engine.calculate(
            madhab="shafii", estate=Estate(total="lots", currency="XYZ"), heirs={"cousin_once_removed": 1}
        )
        assert not result.success
        assert result.error_code == "INPUT_VALIDATION_FAILED"
        assert len(result.errors) == 3
        assert result.steps[0].level is StepLevel.ERROR

    def test_spouse_conflict(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"husband": 1, "wife": 1})
        assert not result.success
        assert result.errors == ("husband and wife cannot both be present; wife count set to 0",)

    def test_estate_consumed_by_deductions(self, engine):
        result = engine.calculate(madhab="shafii", estate=Estate(total=1000, debts=1000), heirs={"son": 1})
        assert not result.success
        assert result.error_code == "NON_POSITIVE_ESTATE"

    def test_arithmetic_failure_is_reported(self, engine):
        with patch(
            "mirath_engines.distribution.assign_fixed_shares",
            side_effect=InvalidRationalValueError(1, 0, "zero denominator"),
        ):
            result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"son": 1})
        assert not result.success
        assert result.error_code == "COMPUTATION_ERROR"
        assert result.errors[0].startswith("computation failed: ")

    @pytest.mark.parametrize("total", [10**30, "1e40"])
    def test_estate_beyond_decimal_precision(self, engine, total):
        result = engine.calculate(madhab="shafii", estate=Estate(total=total), heirs={"son": 1})
        assert not result.success
        assert result.error_code == "INPUT_VALIDATION_FAILED"
        assert "exceeds the supported precision" in result.errors[0]

    def test_non_string_currency(self, engine):
        result = engine.calculate(madhab="shafii", estate=Estate(total=1000, currency=840), heirs={"son": 1})
        assert not result.success
        assert result.errors == ("currency must be an ISO 4217 code string, got 840",)

    def test_mixed_type_heir_keys(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={1: 1, "1": "x"})
        assert not result.success
        assert result.error_code == "INPUT_VALIDATION_FAILED"
        assert "unknown heir category: 1" in result.errors

    def test_decimal_failure_during_normalization(self, engine):
        with patch(
            "mirath_engines.distribution.normalize_input",
            side_effect=InvalidOperation("quantize result has too many digits"),
        ):
            result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"son": 1})
        assert not result.success
        assert result.error_code == "COMPUTATION_ERROR"
        assert result.errors[0].startswith("computation failed: ")

    def test_duplicate_share_is_a_computation_failure(self, engine):
        def record_twice(ctx):
            ctx.add_share(HeirKey.SON, ShareClassification.RESIDUARY, 1, Rational.HALF)
            ctx.add_share(HeirKey.SON, ShareClassification.RESIDUARY, 1, Rational.HALF)

        with patch("mirath_engines.distribution.assign_residuary", side_effect=record_twice):
            result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"son": 1})
        assert not result.success
        assert result.error_code == "COMPUTATION_ERROR"
        assert result.errors == ("computation failed: Share for son already recorded",)


class TestResultShape:
    def test_no_heirs(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={})
        assert result.success
        assert result.shares == ()
        assert "no eligible heir; nothing was distributed" in result.warnings

    def test_clipping_warnings_carried(self, engine):
        result = engine.calculate(madhab="shafii", estate=Estate(total=900, will=600), heirs={"son": 1})
        assert result.success
        assert result.net_estate == Decimal("600.00")
        assert any("bequest" in w for w in result.warnings)

    def test_steps_start_with_net_estate(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"son": 1})
        assert result.steps[0].title == "Net estate"

    def test_madhab_name_from_rule_book(self, engine, rule_book):
        result = engine.calculate(madhab="HANBALI", estate=ESTATE, heirs={"son": 1})
        assert result.madhab == "hanbali"
        assert result.madhab_name == rule_book.madhab("hanbali").name

    def test_accepts_heir_counts(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs=HeirCounts.of(daughter=2, son=1))
        assert _fractions(result) == {"son": R(1, 2), "daughter": R(1, 2)}

    def test_to_dict_round_trips_through_json(self, engine):
        result = engine.calculate(
            madhab="shafii", estate=ESTATE, heirs={"husband": 1, "full_sister": 2, "mother": 1}
        )
        data = json.loads(json.dumps(result.to_dict(), ensure_ascii=False))
        assert data["awl_ratio"] == "3/4"
        assert data["estate"]["currency"] == "SAR"
        assert [s["key"] for s in data["shares"]] == ["husband", "mother", "full_sister"]


class TestProperties:
    CASES = [
        ("shafii", {"husband": 1, "father": 1, "mother": 1}),
        ("hanafi", {"wife": 4, "daughter": 3, "father": 1, "mother": 1}),
        ("maliki", {"husband": 1, "mother": 1, "maternal_brother": 2, "full_brother": 3}),
        ("hanbali", {"grandfather": 1, "full_brother": 2, "paternal_sister": 1, "mother": 1}),
        ("shafii", {"daughter": 1, "granddaughter": 2, "full_sister": 1, "full_uncle": 1}),
        ("hanafi", {"grandmother_mother": 1, "grandmother_father": 1, "daughter_son": 2}),
        ("maliki", {"wife": 1, "paternal_aunt": 1}),
    ]

    @pytest.mark.parametrize("madhab,heirs", CASES)
    def test_fractions_sum_to_one(self, engine, madhab, heirs):
        result = engine.calculate(madhab=madhab, estate=Estate(total=100000, funeral=777.77), heirs=heirs)
        assert result.fraction_sum == Rational.ONE
        assert result.amount_sum == result.net_estate

    @pytest.mark.parametrize("madhab,heirs", CASES)
    def test_blocked_heirs_hold_nothing(self, engine, madhab, heirs):
        result = engine.calculate(madhab=madhab, estate=ESTATE, heirs=heirs)
        for entry in result.blocked:
            assert result.share(entry.heir) is None

    @pytest.mark.parametrize("madhab,heirs", CASES)
    def test_idempotent(self, rule_book, madhab, heirs):
        first = DistributionEngine(rule_book=rule_book).calculate(madhab=madhab, estate=ESTATE, heirs=heirs)
        second = DistributionEngine(rule_book=rule_book).calculate(madhab=madhab, estate=ESTATE, heirs=heirs)
        assert first == second
        assert first.to_dict() == second.to_dict()
