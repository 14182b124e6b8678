"""Spell slots, bonus spells and prepared-spell validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from engine.abilities import modifier_of
from engine.progression import levels_by_class

if TYPE_CHECKING:
    from models.characters import AbilityScores, CharacterBuild
    from models.rules import ClassDefinition, RuleBook

MAX_SPELL_LEVEL = 9


def bonus_spells(ability_modifier: int) -> list[int]:
    """Bonus spells per day for spell levels 0-9 from a high casting ability.

    Level 0 never gets bonus spells; level L (1-9) gets (mod - L) // 4 + 1
    once the modifier reaches L.
    """
    bonus = [0]
    for spell_level in range(1, MAX_SPELL_LEVEL + 1):
        if ability_modifier >= spell_level:
            bonus.append((ability_modifier - spell_level) // 4 + 1)
        else:
            bonus.append(0)
    return bonus


def _table_row(class_def: ClassDefinition, level: int) -> list[int | None]:
    if level < 1 or not class_def.spells_per_day:
        return []
    row = min(level, len(class_def.spells_per_day))
    return class_def.spells_per_day[row - 1]


def spells_per_day(class_def: ClassDefinition, level: int, ability_score: int) -> list[int]:
    """Spell slots per spell level for one class.

    Args:
        class_def: The casting class.
        level: Levels in that class.
        ability_score: Final score in the class's casting ability.

    Returns:
        Slots indexed by spell level. Levels the class cannot cast yet are
        left off the end; a level it can cast but the ability score is too
        low for (10 + spell level) has 0 slots.
    """
    row = _table_row(class_def, level)
    while row and row[-1] is None:
        row = row[:-1]

    bonus = bonus_spells(modifier_of(ability_score))
    slots = []
    for spell_level, base in enumerate(row):
        if base is None or ability_score < 10 + spell_level:
            slots.append(0)
        else:
            slots.append(base + bonus[spell_level])
    return slots


def caster_level(class_def: ClassDefinition, level: int) -> int:
    """Caster level from levels in one class.

    Classes that cast from 1st level use their class level; half casters
    (paladin, ranger) use half their level once their table grants spells.
    """
    if not class_def.is_spellcaster or level < 1:
        return 0
    if _table_row(class_def, 1):
        return level
    has_spells = any(base is not None for base in _table_row(class_def, level))
    return level // 2 if has_spells else 0


def spell_slots(build: CharacterBuild, rules: RuleBook, scores: AbilityScores) -> dict[str, list[int]]:
    """Slots for every spellcasting class of the build."""
    slots = {}
    for key, level in levels_by_class(build.classes).items():
        class_def = rules.character_class(key)
        if not class_def.is_spellcaster:
            continue
        slots[key] = spells_per_day(class_def, level, scores.score(class_def.spellcasting_ability))
    return slots


def validate_prepared_spells(
    build: CharacterBuild,
    rules: RuleBook,
    scores: AbilityScores,
) -> list[str]:
    """Check prepared spells against class lists and available slots.

    Unknown spell or class keys raise UnknownReferenceError.
    """
    violations = []
    levels = levels_by_class(build.classes)
    slots = spell_slots(build, rules, scores)

    for class_key, spell_keys in build.prepared_spells.items():
        class_def = rules.character_class(class_key)
        if class_key not in levels:
            violations.append(f"Spells prepared for {class_def.name}, but the build has no {class_def.name} levels")
            continue
        if not class_def.is_spellcaster:
            violations.append(f"{class_def.name} does not cast spells")
            continue

        class_slots = slots[class_key]
        counts: dict[int, int] = {}
        for spell_key in spell_keys:
            spell = rules.spell(spell_key)
            if class_key not in spell.level:
                violations.append(f"{spell.name} is not on the {class_def.name} spell list")
                continue
            spell_level = spell.level[class_key]
            if spell_level >= len(class_slots) or class_slots[spell_level] == 0:
                violations.append(f"{class_def.name} has no level {spell_level} slots for {spell.name}")
                continue
            counts[spell_level] = counts.get(spell_level, 0) + 1

        for spell_level, count in sorted(counts.items()):
            if count > class_slots[spell_level]:
                violations.append(
                    f"{class_def.name} prepared {count} level {spell_level} spells, "
                    f"only {class_slots[spell_level]} slots"
                )
    return violations
