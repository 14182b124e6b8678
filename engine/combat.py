"""Derived combat statistics: armor class, hit points, saves and attacks."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from engine.errors import OutOfRangeError
from engine.progression import iterative_attacks, total_save_bases
from models.results import ArmorClassBreakdown, AttackBonuses, SavingThrows
from models.rules import Ability, Save, Size

if TYPE_CHECKING:
    from models.characters import ClassLevel
    from models.rules import RuleBook

BASE_ARMOR_CLASS = 10

# Size -> modifier to AC and attack rolls
SIZE_MODIFIERS: dict[Size, int] = {
    Size.FINE: 8,
    Size.DIMINUTIVE: 4,
    Size.TINY: 2,
    Size.SMALL: 1,
    Size.MEDIUM: 0,
    Size.LARGE: -1,
    Size.HUGE: -2,
    Size.GARGANTUAN: -4,
    Size.COLOSSAL: -8,
}

# Size -> special size modifier to grapple checks
GRAPPLE_SIZE_MODIFIERS: dict[Size, int] = {
    Size.FINE: -16,
    Size.DIMINUTIVE: -12,
    Size.TINY: -8,
    Size.SMALL: -4,
    Size.MEDIUM: 0,
    Size.LARGE: 4,
    Size.HUGE: 8,
    Size.GARGANTUAN: 12,
    Size.COLOSSAL: 16,
}

SAVE_ABILITIES = {
    Save.FORTITUDE: Ability.CONSTITUTION,
    Save.REFLEX: Ability.DEXTERITY,
    Save.WILL: Ability.WISDOM,
}


class HpPolicy(str, Enum):
    """How hit dice after the very first level are counted."""
    MAX = "max"
    AVERAGE = "average"             # die // 2 + 1
    ROLLED = "rolled"               # Player-supplied rolls


def size_modifier(size: Size) -> int:
    """AC and attack modifier for a size category."""
    return SIZE_MODIFIERS[Size(size)]


def armor_class(
    armor_bonus: int = 0,
    shield_bonus: int = 0,
    dex_modifier: int = 0,
    size_modifier: int = 0,
    deflection: int = 0,
    dodge: int = 0,
    natural: int = 0,
    other: int = 0,
    max_dex_bonus: int | None = None,
    base: int = BASE_ARMOR_CLASS,
) -> ArmorClassBreakdown:
    """Sum armor class, clamping Dex to the armor's max-dex bonus.

    Args:
        armor_bonus: Bonus from worn armor.
        shield_bonus: Bonus from a shield.
        dex_modifier: Raw Dexterity modifier.
        size_modifier: Size modifier to AC.
        deflection: Deflection bonus.
        dodge: Dodge bonus.
        natural: Natural armor bonus.
        other: Any other bonus.
        max_dex_bonus: Lowest max-dex cap from armor, shield or load, or None.
        base: Base armor class.

    Returns:
        ArmorClassBreakdown with total, touch and flat-footed values.
    """
    dex = dex_modifier
    if max_dex_bonus is not None and dex > max_dex_bonus:
        dex = max_dex_bonus

    total = (
        base + armor_bonus + shield_bonus + dex + size_modifier
        + deflection + dodge + natural + other
    )
    touch = total - armor_bonus - shield_bonus - natural
    # Flat-footed loses a Dex bonus but keeps a Dex penalty
    flat_footed = total - max(dex, 0) - dodge

    return ArmorClassBreakdown(
        total=total,
        touch=touch,
        flat_footed=flat_footed,
        armor_bonus=armor_bonus,
        shield_bonus=shield_bonus,
        dex_bonus=dex,
        size_modifier=size_modifier,
        deflection=deflection,
        dodge=dodge,
        natural=natural,
        other=other,
    )


def hit_dice(classes: list[ClassLevel], rules: RuleBook) -> list[int]:
    """Hit die size for each character level, in the order levels were taken."""
    dice = []
    for entry in classes:
        dice.extend([rules.character_class(entry.class_key).hit_die] * entry.level)
    return dice


def hit_points(
    class_levels: list[tuple[int, int]],
    policy: HpPolicy = HpPolicy.AVERAGE,
    rolls: list[int] | None = None,
) -> int:
    """Total hit points over all levels.

    The very first level always takes the maximum die. Every level adds the
    Con modifier and is worth at least 1 hit point.

    Args:
        class_levels: (hit die size, Con modifier) for each character level, in order.
        policy: How levels after the first are counted.
        rolls: Die results for levels after the first when policy is ROLLED.

    Returns:
        Total hit points.

    Raises:
        OutOfRangeError: If rolls are missing or impossible for their die.
    """
    policy = HpPolicy(policy)
    rolls = rolls or []
    if policy == HpPolicy.ROLLED and len(rolls) < len(class_levels) - 1:
        raise OutOfRangeError(
            f"Rolled hit points need {len(class_levels) - 1} rolls, got {len(rolls)}"
        )

    total = 0
    for index, (die, con_modifier) in enumerate(class_levels):
        if index == 0 or policy == HpPolicy.MAX:
            value = die
        elif policy == HpPolicy.AVERAGE:
            value = die // 2 + 1
        else:
            value = rolls[index - 1]
            if not 1 <= value <= die:
                raise OutOfRangeError(f"Roll {value} is impossible on a d{die}")
        total += max(1, value + con_modifier)
    return total


def saving_throws(
    classes: list[ClassLevel],
    modifiers: dict[Ability, int],
    rules: RuleBook,
    misc: int = 0,
    save_bonuses: dict[Save, int] | None = None,
) -> SavingThrows:
    """Save totals: multiclass base + Con/Dex/Wis + misc bonuses.

    Args:
        classes: The build's class levels.
        modifiers: Ability modifiers.
        rules: The rulebook.
        misc: Bonus applied to every save.
        save_bonuses: Extra per-save bonuses such as feats.

    Returns:
        SavingThrows.
    """
    bases = total_save_bases(classes, rules)
    save_bonuses = save_bonuses or {}
    totals = {
        save: bases[save] + modifiers[SAVE_ABILITIES[save]] + misc + save_bonuses.get(save, 0)
        for save in Save
    }
    return SavingThrows(
        fortitude=totals[Save.FORTITUDE],
        reflex=totals[Save.REFLEX],
        will=totals[Save.WILL],
    )


def attack_bonuses(bab: int, str_modifier: int, dex_modifier: int, size: Size) -> AttackBonuses:
    """Melee, ranged and grapple bonuses, with the melee iterative sequence."""
    size_mod = size_modifier(size)
    melee = bab + str_modifier + size_mod
    return AttackBonuses(
        base_attack_bonus=bab,
        melee=melee,
        ranged=bab + dex_modifier + size_mod,
        grapple=bab + str_modifier + GRAPPLE_SIZE_MODIFIERS[Size(size)],
        iterative=[step + str_modifier + size_mod for step in iterative_attacks(bab)],
    )


def initiative(dex_modifier: int, bonus: int = 0) -> int:
    """Initiative modifier."""
    return dex_modifier + bonus
