"""
Tests for exclusion (hijab), one class per rule of the exclusion table.

Each test builds a context from raw heirs, runs the full rule table and
inspects the blocked-heir log and the live counts.
"""

from mirath_engines.hijab import HIJAB_RULES, apply_hijab
from mirath_kernel.domain.heirs import HeirKey
from mirath_kernel.domain.result import StepLevel

H = HeirKey


def _blocked_by(ctx):
    return {entry.heir: entry.blocked_by for entry in ctx.blocked}


class TestRuleTable:
    def test_rules_are_numbered_in_order(self):
        assert [rule.number for rule in HIJAB_RULES] == list(range(1, 12))

    def test_no_exclusion_records_success_step(self, make_context):
        ctx = make_context(husband=1, son=1)
        assert apply_hijab(ctx) == []
        assert ctx.steps[-1].level is StepLevel.SUCCESS

    def test_exclusion_step_lists_heirs(self, make_context):
        ctx = make_context(father=1, grandfather=1, full_brother=1)
        added = apply_hijab(ctx)
        assert len(added) == 2
        assert ctx.steps[-1].level is StepLevel.WARNING
        assert "grandfather" in ctx.steps[-1].description

    def test_absent_heirs_are_not_logged(self, make_context):
        ctx = make_context(father=1)
        apply_hijab(ctx)
        assert ctx.blocked == []


class TestAscendantRules:
    """Rules 1-3."""

    def test_father_excludes_grandfather(self, make_context):
        ctx = make_context(father=1, grandfather=1, son=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.GRANDFATHER] == "father"
        assert ctx.count(H.GRANDFATHER) == 0

    def test_mother_excludes_both_grandmothers(self, make_context):
        ctx = make_context(mother=1, grandmother_mother=1, grandmother_father=1, son=1)
        apply_hijab(ctx)
        blocked = _blocked_by(ctx)
        assert blocked[H.GRANDMOTHER_MOTHER] == "mother"
        assert blocked[H.GRANDMOTHER_FATHER] == "mother"

    def test_father_excludes_only_his_own_mother(self, make_context):
        ctx = make_context(father=1, grandmother_mother=1, grandmother_father=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx) == {H.GRANDMOTHER_FATHER: "father"}
        assert ctx.has(H.GRANDMOTHER_MOTHER)


class TestDescendantRules:
    """Rules 4-5."""

    def test_son_excludes_grandchildren(self, make_context):
        ctx = make_context(son=1, grandson=2, granddaughter=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx) == {H.GRANDSON: "son", H.GRANDDAUGHTER: "son"}

    def test_two_daughters_exclude_granddaughter(self, make_context):
        ctx = make_context(daughter=2, granddaughter=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.GRANDDAUGHTER] == "daughter"

    def test_grandson_saves_granddaughter(self, make_context):
        ctx = make_context(daughter=2, granddaughter=1, grandson=1)
        apply_hijab(ctx)
        assert H.GRANDDAUGHTER not in _blocked_by(ctx)

    def test_one_daughter_does_not_exclude(self, make_context):
        ctx = make_context(daughter=1, granddaughter=1)
        apply_hijab(ctx)
        assert ctx.has(H.GRANDDAUGHTER)


class TestSiblingRules:
    """Rules 6-10."""

    def test_son_excludes_full_and_paternal_siblings(self, make_context):
        ctx = make_context(son=1, full_brother=1, full_sister=1, paternal_brother=1, paternal_sister=1)
        apply_hijab(ctx)
        blocked = _blocked_by(ctx)
        for heir in (H.FULL_BROTHER, H.FULL_SISTER, H.PATERNAL_BROTHER, H.PATERNAL_SISTER):
            assert blocked[heir] == "son"

    def test_father_named_before_son(self, make_context):
        ctx = make_context(father=1, son=1, full_brother=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.FULL_BROTHER] == "father"

    def test_grandson_excludes_siblings(self, make_context):
        ctx = make_context(grandson=1, full_sister=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.FULL_SISTER] == "grandson"

    def test_grandfather_excludes_siblings_when_policy_blocks(self, make_context):
        ctx = make_context("shafii", grandfather=1, full_brother=2)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.FULL_BROTHER] == "grandfather"
        assert any("grandfather excludes" in note for note in ctx.notes)

    def test_grandfather_shares_with_siblings_when_policy_shares(self, make_context):
        ctx = make_context("hanbali", grandfather=1, full_brother=2)
        apply_hijab(ctx)
        assert ctx.count(H.FULL_BROTHER) == 2
        assert ctx.notes == []

    def test_descendant_excludes_maternal_siblings(self, make_context):
        ctx = make_context(daughter=1, maternal_brother=1, maternal_sister=1)
        apply_hijab(ctx)
        blocked = _blocked_by(ctx)
        assert blocked[H.MATERNAL_BROTHER] == "daughter"
        assert blocked[H.MATERNAL_SISTER] == "daughter"

    def test_grandfather_excludes_maternal_siblings_in_every_madhab(self, make_context):
        ctx = make_context("hanbali", grandfather=1, maternal_sister=2)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.MATERNAL_SISTER] == "grandfather"

    def test_mother_does_not_exclude_maternal_siblings(self, make_context):
        ctx = make_context(mother=1, maternal_brother=2)
        apply_hijab(ctx)
        assert ctx.count(H.MATERNAL_BROTHER) == 2

    def test_full_brother_excludes_paternal_brother(self, make_context):
        ctx = make_context(full_brother=1, paternal_brother=3)
        apply_hijab(ctx)
        assert _blocked_by(ctx) == {H.PATERNAL_BROTHER: "full_brother"}

    def test_two_full_sisters_exclude_paternal_sister(self, make_context):
        ctx = make_context(full_sister=2, paternal_sister=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.PATERNAL_SISTER] == "full_sister"

    def test_paternal_brother_saves_paternal_sister(self, make_context):
        ctx = make_context(full_sister=2, paternal_sister=1, paternal_brother=1)
        apply_hijab(ctx)
        assert ctx.has(H.PATERNAL_SISTER)


class TestDistantResiduaries:
    """Rule 11."""

    def test_nearer_residuary_excludes_distant_tier(self, make_context):
        ctx = make_context(full_brother=1, full_nephew=1, full_uncle=1)
        apply_hijab(ctx)
        blocked = _blocked_by(ctx)
        assert blocked[H.FULL_NEPHEW] == "full_brother"
        assert blocked[H.FULL_UNCLE] == "full_brother"

    def test_nearest_distant_category_excludes_farther(self, make_context):
        ctx = make_context(paternal_nephew=1, full_uncle=2, paternal_cousin=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx) == {H.FULL_UNCLE: "paternal_nephew", H.PATERNAL_COUSIN: "paternal_nephew"}
        assert ctx.has(H.PATERNAL_NEPHEW)

    def test_grandfather_excludes_distant_tier_when_sharing(self, make_context):
        ctx = make_context("maliki", grandfather=1, full_uncle=1)
        apply_hijab(ctx)
        assert _blocked_by(ctx)[H.FULL_UNCLE] == "grandfather"
