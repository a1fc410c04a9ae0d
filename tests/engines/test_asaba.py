"""
Tests for residuary ('asaba) allocation.

Covers:
- The precedence table (one class takes the whole residue)
- 2:1 male/female weighting
- Fixed+residuary top-ups for the father
- Grandfather sharing with siblings
- Sisters made residuary by daughters
- Distant agnates
"""

from mirath_engines.asaba import RESIDUARY_CLASSES
from mirath_kernel.domain import Estate
from mirath_kernel.domain.rational import Rational
from mirath_kernel.domain.result import SpecialCaseType
from mirath_kernel.domain.share import ShareClassification

R = Rational
ESTATE = Estate(total=120000)


def _fractions(result):
    return {line.heir_key.value: line.fraction for line in result.shares}


class TestPrecedenceTable:
    def test_class_order(self):
        assert [c.name for c in RESIDUARY_CLASSES] == [
            "sons",
            "son's sons",
            "father",
            "grandfather with siblings",
            "grandfather",
            "full brothers",
            "full sisters with daughters",
            "paternal brothers",
            "paternal sisters with daughters",
            "distant agnates",
        ]


class TestChildren:
    def test_son_takes_twice_a_daughter(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"son": 1, "daughter": 2})
        assert _fractions(result) == {"son": R(1, 2), "daughter": R(1, 2)}
        assert result.share("son").classification is ShareClassification.RESIDUARY

    def test_residue_after_wife(self, engine):
        result = engine.calculate(
            madhab="hanafi", estate=ESTATE, heirs={"wife": 1, "son": 1, "daughter": 1}
        )
        assert _fractions(result) == {"wife": R(1, 8), "son": R(7, 12), "daughter": R(7, 24)}

    def test_grandsons_when_no_son(self, engine):
        result = engine.calculate(
            madhab="shafii", estate=ESTATE, heirs={"husband": 1, "grandson": 1, "granddaughter": 1}
        )
        assert _fractions(result) == {"husband": R(1, 4), "grandson": R(1, 2), "granddaughter": R(1, 4)}


class TestAscendants:
    def test_father_fixed_plus_residue(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"father": 1, "daughter": 1})
        father = result.share("father")
        assert father.fraction == R(1, 2)
        assert father.original_fraction == R(1, 6)
        assert father.classification is ShareClassification.FIXED_RESIDUARY

    def test_father_takes_all_after_mother(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"father": 1, "mother": 1})
        assert _fractions(result) == {"mother": R(1, 3), "father": R(2, 3)}

    def test_grandfather_shares_with_siblings(self, engine):
        result = engine.calculate(
            madhab="hanbali",
            estate=ESTATE,
            heirs={"grandfather": 1, "full_brother": 1, "full_sister": 1},
        )
        assert _fractions(result) == {"grandfather": R(2, 5), "full_brother": R(2, 5), "full_sister": R(1, 5)}
        assert result.has_special_case(SpecialCaseType.GRANDFATHER_WITH_SIBLINGS)

    def test_grandfather_alone_excludes_siblings(self, engine):
        result = engine.calculate(
            madhab="shafii",
            estate=ESTATE,
            heirs={"grandfather": 1, "full_brother": 1, "full_sister": 1},
        )
        assert _fractions(result) == {"grandfather": R(1)}
        assert result.is_blocked("full_brother")


class TestSiblings:
    def test_mixed_full_siblings(self, engine):
        result = engine.calculate(
            madhab="shafii", estate=ESTATE, heirs={"mother": 1, "full_brother": 1, "full_sister": 2}
        )
        assert _fractions(result) == {"mother": R(1, 6), "full_brother": R(5, 12), "full_sister": R(5, 12)}

    def test_full_sister_with_daughter(self, engine):
        result = engine.calculate(
            madhab="shafii",
            estate=ESTATE,
            heirs={"daughter": 1, "full_sister": 1, "paternal_brother": 1},
        )
        assert _fractions(result) == {"daughter": R(1, 2), "full_sister": R(1, 2)}
        assert result.has_special_case(SpecialCaseType.SISTER_WITH_DAUGHTERS)
        assert result.is_blocked("paternal_brother")

    def test_paternal_sister_with_daughters(self, engine):
        result = engine.calculate(
            madhab="shafii",
            estate=ESTATE,
            heirs={"daughter": 2, "paternal_sister": 1, "full_uncle": 1},
        )
        assert _fractions(result) == {"daughter": R(2, 3), "paternal_sister": R(1, 3)}
        assert result.has_special_case(SpecialCaseType.PATERNAL_SISTER_WITH_DAUGHTERS)
        assert result.is_blocked("full_uncle")

    def test_paternal_brothers(self, engine):
        result = engine.calculate(
            madhab="shafii",
            estate=ESTATE,
            heirs={"full_sister": 1, "paternal_brother": 1, "paternal_sister": 1},
        )
        assert _fractions(result) == {
            "full_sister": R(1, 2),
            "paternal_brother": R(1, 3),
            "paternal_sister": R(1, 6),
        }


class TestDistantAgnates:
    def test_uncles_take_residue(self, engine):
        result = engine.calculate(madhab="shafii", estate=ESTATE, heirs={"wife": 1, "full_uncle": 2})
        uncle = result.share("full_uncle")
        assert uncle.fraction == R(3, 4)
        assert uncle.multiplicity == 2
        assert uncle.fraction_per_person == R(3, 8)

    def test_nothing_left_for_residuaries(self, engine):
        result = engine.calculate(
            madhab="shafii",
            estate=ESTATE,
            heirs={"husband": 1, "full_sister": 1, "full_uncle": 1},
        )
        assert _fractions(result) == {"husband": R(1, 2), "full_sister": R(1, 2)}
        assert result.share("full_uncle") is None
        assert not result.is_blocked("full_uncle")
