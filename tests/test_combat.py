"""Tests for derived combat statistics: AC, hit points, saves and attacks."""

import pytest

from engine.combat import (
    HpPolicy,
    armor_class,
    attack_bonuses,
    hit_dice,
    hit_points,
    initiative,
    saving_throws,
    size_modifier,
)
from engine.errors import OutOfRangeError
from models.characters import ClassLevel
from models.rules import Ability, Save, Size


def _mods(str_=0, dex=0, con=0, int_=0, wis=0, cha=0) -> dict[Ability, int]:
    """Helper to build an ability modifier map."""
    return {
        Ability.STRENGTH: str_,
        Ability.DEXTERITY: dex,
        Ability.CONSTITUTION: con,
        Ability.INTELLIGENCE: int_,
        Ability.WISDOM: wis,
        Ability.CHARISMA: cha,
    }


class TestArmorClass:
    """Tests for armor_class()."""

    def test_unarmored(self):
        ac = armor_class(dex_modifier=2)
        assert ac.total == 12
        assert ac.touch == 12
        assert ac.flat_footed == 10

    def test_max_dex_clamps(self):
        """Full plate (+8, max Dex +1) with Dex +3 only counts +1."""
        ac = armor_class(armor_bonus=8, dex_modifier=3, max_dex_bonus=1)
        assert ac.dex_bonus == 1
        assert ac.total == 19
        assert ac.touch == 11
        assert ac.flat_footed == 18

    def test_max_dex_above_modifier_no_clamp(self):
        ac = armor_class(armor_bonus=2, dex_modifier=3, max_dex_bonus=6)
        assert ac.total == 15

    def test_all_components_sum(self):
        ac = armor_class(
            armor_bonus=5,
            shield_bonus=2,
            dex_modifier=1,
            size_modifier=1,
            deflection=2,
            dodge=1,
            natural=3,
            other=1,
        )
        assert ac.total == 10 + 5 + 2 + 1 + 1 + 2 + 1 + 3 + 1
        assert ac.touch == ac.total - 5 - 2 - 3
        assert ac.flat_footed == ac.total - 1 - 1

    def test_negative_dex_kept_when_flat_footed(self):
        ac = armor_class(dex_modifier=-1)
        assert ac.total == 9
        assert ac.flat_footed == 9

    def test_negative_dex_not_raised_by_cap(self):
        ac = armor_class(dex_modifier=-2, max_dex_bonus=0)
        assert ac.dex_bonus == -2


class TestSizeModifier:
    """Tests for size_modifier()."""

    def test_small_and_large(self):
        assert size_modifier(Size.SMALL) == 1
        assert size_modifier(Size.MEDIUM) == 0
        assert size_modifier(Size.LARGE) == -1

    def test_extremes(self):
        assert size_modifier("fine") == 8
        assert size_modifier(Size.COLOSSAL) == -8


class TestHitPoints:
    """Tests for hit_points()."""

    def test_first_level_max(self):
        assert hit_points([(10, 0)]) == 10

    def test_average_policy(self):
        """d10: 10 + 6 + 6, plus Con +2 per level."""
        assert hit_points([(10, 2)] * 3, HpPolicy.AVERAGE) == 28

    def test_max_policy(self):
        assert hit_points([(10, 2)] * 3, HpPolicy.MAX) == 36

    def test_rolled_policy(self):
        assert hit_points([(10, 0)] * 3, HpPolicy.ROLLED, [3, 7]) == 20

    def test_minimum_one_per_level(self):
        assert hit_points([(4, -3)]) == 1
        assert hit_points([(4, -5), (4, -5)], HpPolicy.AVERAGE) == 2

    def test_multiclass_first_class_max(self):
        """Fighter 1 then Wizard 2: 10 + 3 + 3."""
        assert hit_points([(10, 0), (4, 0), (4, 0)]) == 16

    def test_no_levels(self):
        assert hit_points([]) == 0

    def test_missing_rolls(self):
        with pytest.raises(OutOfRangeError):
            hit_points([(8, 0)] * 3, HpPolicy.ROLLED, [4])

    def test_impossible_roll(self):
        with pytest.raises(OutOfRangeError):
            hit_points([(10, 0), (10, 0)], HpPolicy.ROLLED, [11])

    def test_hit_dice_order(self, rules):
        classes = [ClassLevel(class_key="fighter", level=1), ClassLevel(class_key="wizard", level=2)]
        assert hit_dice(classes, rules) == [10, 4, 4]


class TestSavingThrows:
    """Tests for saving_throws()."""

    def test_multiclass_with_modifiers(self, rules):
        classes = [ClassLevel(class_key="fighter", level=4), ClassLevel(class_key="wizard", level=4)]
        saves = saving_throws(classes, _mods(con=2, dex=1, wis=-1), rules, misc=1)
        assert saves.fortitude == 5 + 2 + 1
        assert saves.reflex == 2 + 1 + 1
        assert saves.will == 5 - 1 + 1

    def test_per_save_bonuses(self, rules):
        classes = [ClassLevel(class_key="monk", level=1)]
        saves = saving_throws(classes, _mods(), rules, save_bonuses={Save.FORTITUDE: 2})
        assert saves.fortitude == 4
        assert saves.reflex == 2
        assert saves.will == 2


class TestAttackBonuses:
    """Tests for attack_bonuses()."""

    def test_medium(self):
        attacks = attack_bonuses(6, 3, 2, Size.MEDIUM)
        assert attacks.melee == 9
        assert attacks.ranged == 8
        assert attacks.grapple == 9
        assert attacks.iterative == [9, 4]

    def test_small(self):
        attacks = attack_bonuses(1, -1, 2, Size.SMALL)
        assert attacks.melee == 1
        assert attacks.ranged == 4
        assert attacks.grapple == -4
        assert attacks.iterative == [1]


class TestInitiative:
    """Tests for initiative()."""

    def test_dex_plus_bonus(self):
        assert initiative(2, 4) == 6
        assert initiative(-1) == -1
