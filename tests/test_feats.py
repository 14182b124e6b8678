"""Tests for feat prerequisite checks and feat bonuses."""

import pytest

from engine.errors import UnknownReferenceError
from engine.feats import available_feats, check_prerequisites, feat_bonuses, validate_feats
from models.characters import AbilityScores, CharacterBuild, ClassLevel
from models.rules import Save


def _make_build(
    race: str = "human",
    classes: list[tuple[str, int]] | None = None,
    feats: list[str] | None = None,
    ranks: dict[str, int] | None = None,
    **scores: int,
) -> CharacterBuild:
    """Helper to create a build for prerequisite checks."""
    return CharacterBuild(
        race=race,
        classes=[ClassLevel(class_key=k, level=lv) for k, lv in (classes or [("fighter", 1)])],
        feats=feats or [],
        skill_ranks=ranks or {},
        ability_scores=AbilityScores(**scores),
    )


class TestCheckPrerequisites:
    """Tests for check_prerequisites()."""

    def test_no_prerequisites(self, rules):
        check = check_prerequisites(rules.feat("alertness"), _make_build(), rules)
        assert check.eligible is True
        assert check.missing == []
        assert check.feat == "alertness"

    def test_ability_minimum(self, rules):
        feat = rules.feat("power_attack")
        assert check_prerequisites(feat, _make_build(strength=13), rules).eligible is True
        check = check_prerequisites(feat, _make_build(strength=12), rules)
        assert check.eligible is False
        assert check.missing == ["Strength 13 (has 12)"]

    def test_racial_adjustment_counts(self, rules):
        """A half-orc with base Str 11 has 13 after racial adjustment."""
        check = check_prerequisites(rules.feat("power_attack"), _make_build(race="half-orc", strength=11), rules)
        assert check.eligible is True

    def test_all_failures_reported(self, rules):
        """Whirlwind Attack lists every gap, not just the first."""
        check = check_prerequisites(rules.feat("whirlwind_attack"), _make_build(), rules)
        assert check.eligible is False
        # Dex, Int, BAB and four required feats
        assert len(check.missing) == 7

    def test_bab_minimum(self, rules):
        feat = rules.feat("great_cleave")
        build = _make_build(classes=[("fighter", 4)], feats=["power_attack", "cleave"], strength=13)
        assert check_prerequisites(feat, build, rules).eligible is True
        build = _make_build(classes=[("wizard", 7)], feats=["power_attack", "cleave"], strength=13)
        check = check_prerequisites(feat, build, rules)
        assert check.missing == ["Base attack bonus +4 (has +3)"]

    def test_multiclass_bab(self, rules):
        """Fighter 2 / Rogue 3 has BAB 2 + 2 = 4."""
        build = _make_build(classes=[("fighter", 2), ("rogue", 3)], feats=["power_attack", "cleave"], strength=13)
        assert check_prerequisites(rules.feat("great_cleave"), build, rules).eligible is True

    def test_skill_minimum(self, rules):
        feat = rules.feat("mounted_combat")
        assert check_prerequisites(feat, _make_build(ranks={"ride": 1}), rules).eligible is True
        check = check_prerequisites(feat, _make_build(), rules)
        assert check.missing == ["1 ranks in Ride (has 0)"]

    def test_required_feat(self, rules):
        check = check_prerequisites(rules.feat("cleave"), _make_build(strength=13), rules)
        assert check.missing == ["Feat: Power Attack"]

    def test_feat_does_not_satisfy_itself(self, rules):
        build = _make_build(feats=["armor_proficiency_medium"])
        check = check_prerequisites(rules.feat("armor_proficiency_medium"), build, rules)
        assert check.eligible is False

    def test_race_restriction(self, rules):
        feat = rules.feat("halfling_dodge")
        assert check_prerequisites(feat, _make_build(race="halfling"), rules).eligible is True
        check = check_prerequisites(feat, _make_build(race="dwarf"), rules)
        assert check.missing == ["Race: halfling"]

    def test_class_restriction_any_of(self, rules):
        feat = rules.feat("extra_turning")
        assert check_prerequisites(feat, _make_build(classes=[("cleric", 1)]), rules).eligible is True
        assert check_prerequisites(feat, _make_build(classes=[("paladin", 4)]), rules).eligible is True
        assert check_prerequisites(feat, _make_build(classes=[("paladin", 3)]), rules).eligible is False

    def test_class_level_required(self, rules):
        feat = rules.feat("weapon_specialization")
        build = _make_build(classes=[("fighter", 3)], feats=["weapon_focus"])
        check = check_prerequisites(feat, build, rules)
        assert check.missing == ["Class level: fighter 4"]

    def test_minimum_character_level(self, rules):
        feat = rules.feat("epic_toughness")
        build = _make_build(classes=[("fighter", 20)], feats=["toughness"])
        check = check_prerequisites(feat, build, rules)
        assert check.missing == ["Character level 21 (has 20)"]

    def test_caster_level(self, rules):
        feat = rules.feat("brew_potion")
        assert check_prerequisites(feat, _make_build(classes=[("wizard", 3)]), rules).eligible is True
        assert check_prerequisites(feat, _make_build(classes=[("wizard", 2)]), rules).eligible is False
        assert check_prerequisites(feat, _make_build(classes=[("fighter", 10)]), rules).eligible is False

    def test_half_caster_level(self, rules):
        """A 6th-level paladin has caster level 3."""
        feat = rules.feat("brew_potion")
        assert check_prerequisites(feat, _make_build(classes=[("paladin", 6)]), rules).eligible is True
        assert check_prerequisites(feat, _make_build(classes=[("paladin", 5)]), rules).eligible is False

    def test_pure(self, rules):
        build = _make_build()
        feat = rules.feat("dodge")
        assert check_prerequisites(feat, build, rules) == check_prerequisites(feat, build, rules)


class TestAvailableFeats:
    """Tests for available_feats()."""

    def test_excludes_taken_and_ineligible(self, rules):
        build = _make_build(feats=["alertness"], strength=13)
        keys = {feat.key for feat in available_feats(build, rules)}
        assert "alertness" not in keys
        assert "power_attack" in keys
        assert "cleave" not in keys
        assert "halfling_dodge" not in keys


class TestValidateFeats:
    """Tests for validate_feats()."""

    def test_valid_chain(self, rules):
        """Human fighter 1 has three slots and may take a chain together."""
        build = _make_build(feats=["power_attack", "cleave", "alertness"], strength=13)
        assert validate_feats(build, rules) == []

    def test_unmet_prerequisite(self, rules):
        build = _make_build(feats=["cleave"], strength=13)
        violations = validate_feats(build, rules)
        assert len(violations) == 1
        assert "Cleave" in violations[0]

    def test_duplicate(self, rules):
        build = _make_build(feats=["alertness", "alertness"])
        assert any("more than once" in v for v in validate_feats(build, rules))

    def test_too_many(self, rules):
        build = _make_build(race="dwarf", classes=[("rogue", 1)], feats=["alertness", "toughness"])
        violations = validate_feats(build, rules)
        assert violations == ["2 feats selected, only 1 available"]

    def test_unknown_feat_raises(self, rules):
        with pytest.raises(UnknownReferenceError):
            validate_feats(_make_build(feats=["super_strength"]), rules)


class TestFeatBonuses:
    """Tests for feat_bonuses()."""

    def test_sums_effects(self, rules):
        effects = feat_bonuses(["alertness", "great_fortitude", "toughness", "improved_initiative", "dodge"], rules)
        assert effects.skills == {"listen": 2, "spot": 2}
        assert effects.saves == {Save.FORTITUDE: 2}
        assert effects.hit_points == 3
        assert effects.initiative == 4
        assert effects.armor_class == 1

    def test_overlapping_skills_stack(self, rules):
        effects = feat_bonuses(["stealthy", "agile", "acrobatic"], rules)
        assert effects.skills["hide"] == 2
        assert effects.skills["balance"] == 2

    def test_duplicates_counted_once(self, rules):
        assert feat_bonuses(["toughness", "toughness"], rules).hit_points == 3

    def test_empty(self, rules):
        effects = feat_bonuses([], rules)
        assert effects.hit_points == 0
        assert effects.skills == {}
