"""Tests for spell slots and prepared spells."""

import pytest

from engine.errors import UnknownReferenceError
from engine.spells import bonus_spells, caster_level, spell_slots, spells_per_day, validate_prepared_spells
from models.characters import AbilityScores, CharacterBuild, ClassLevel


def _make_build(classes: list[tuple[str, int]], prepared: dict[str, list[str]] | None = None) -> CharacterBuild:
    """Helper to create a caster build."""
    return CharacterBuild(
        classes=[ClassLevel(class_key=k, level=lv) for k, lv in classes],
        prepared_spells=prepared or {},
    )


class TestBonusSpells:
    """Tests for bonus_spells()."""

    def test_modifier_three(self):
        assert bonus_spells(3) == [0, 1, 1, 1, 0, 0, 0, 0, 0, 0]

    def test_modifier_five(self):
        assert bonus_spells(5) == [0, 2, 1, 1, 1, 1, 0, 0, 0, 0]

    def test_no_bonus(self):
        assert bonus_spells(0) == [0] * 10
        assert bonus_spells(-2) == [0] * 10


class TestSpellsPerDay:
    """Tests for spells_per_day()."""

    def test_wizard_one(self, rules):
        assert spells_per_day(rules.character_class("wizard"), 1, 16) == [3, 2]

    def test_wizard_five(self, rules):
        assert spells_per_day(rules.character_class("wizard"), 5, 18) == [4, 4, 3, 2]

    def test_ability_too_low_for_level(self, rules):
        """Int 11 cannot cast 2nd-level spells."""
        assert spells_per_day(rules.character_class("wizard"), 3, 11) == [4, 2, 0]

    def test_ability_below_ten(self, rules):
        assert spells_per_day(rules.character_class("wizard"), 1, 9) == [0, 0]

    def test_paladin_before_spells(self, rules):
        assert spells_per_day(rules.character_class("paladin"), 3, 14) == []

    def test_paladin_zero_slot_gets_bonus(self, rules):
        """A paladin 4 with Wis 12 has 0 base + 1 bonus first-level slots."""
        assert spells_per_day(rules.character_class("paladin"), 4, 12) == [0, 1]
        assert spells_per_day(rules.character_class("paladin"), 4, 10) == [0, 0]

    def test_non_caster(self, rules):
        assert spells_per_day(rules.character_class("fighter"), 5, 18) == []


class TestCasterLevel:
    """Tests for caster_level()."""

    def test_full_caster(self, rules):
        assert caster_level(rules.character_class("cleric"), 7) == 7

    def test_half_caster(self, rules):
        paladin = rules.character_class("paladin")
        assert caster_level(paladin, 3) == 0
        assert caster_level(paladin, 4) == 2
        assert caster_level(paladin, 11) == 5

    def test_non_caster(self, rules):
        assert caster_level(rules.character_class("fighter"), 10) == 0


class TestSpellSlots:
    """Tests for spell_slots()."""

    def test_multiclass_casters(self, rules):
        build = _make_build([("cleric", 1), ("wizard", 1), ("fighter", 1)])
        slots = spell_slots(build, rules, AbilityScores(intelligence=14, wisdom=12))
        assert slots == {"cleric": [3, 2], "wizard": [3, 2]}


class TestValidatePreparedSpells:
    """Tests for validate_prepared_spells()."""

    def test_valid(self, rules):
        build = _make_build([("wizard", 1)], {"wizard": ["light", "daze", "magic_missile", "sleep"]})
        assert validate_prepared_spells(build, rules, AbilityScores(intelligence=14)) == []

    def test_too_many(self, rules):
        build = _make_build([("wizard", 1)], {"wizard": ["magic_missile", "sleep", "shield"]})
        violations = validate_prepared_spells(build, rules, AbilityScores(intelligence=14))
        assert violations == ["Wizard prepared 3 level 1 spells, only 2 slots"]

    def test_spell_level_too_high(self, rules):
        build = _make_build([("wizard", 1)], {"wizard": ["fireball"]})
        violations = validate_prepared_spells(build, rules, AbilityScores(intelligence=18))
        assert violations == ["Wizard has no level 3 slots for Fireball"]

    def test_wrong_class_list(self, rules):
        build = _make_build([("wizard", 1)], {"wizard": ["cure_light_wounds"]})
        violations = validate_prepared_spells(build, rules, AbilityScores(intelligence=14))
        assert violations == ["Cure Light Wounds is not on the Wizard spell list"]

    def test_class_not_taken(self, rules):
        build = _make_build([("wizard", 1)], {"cleric": ["bless"]})
        assert len(validate_prepared_spells(build, rules, AbilityScores())) == 1

    def test_non_caster(self, rules):
        build = _make_build([("fighter", 1)], {"fighter": ["bless"]})
        assert validate_prepared_spells(build, rules, AbilityScores()) == ["Fighter does not cast spells"]

    def test_unknown_spell(self, rules):
        build = _make_build([("wizard", 1)], {"wizard": ["meteor_punch"]})
        with pytest.raises(UnknownReferenceError):
            validate_prepared_spells(build, rules, AbilityScores(intelligence=14))
