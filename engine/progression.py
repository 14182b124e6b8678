"""Class progression: BAB, base saves, skill points, XP and feat slots."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from engine.errors import OutOfRangeError
from models.results import ExperienceProgress
from models.rules import BabProgression, Save, SaveProgression

if TYPE_CHECKING:
    from models.characters import CharacterBuild, ClassLevel
    from models.rules import RuleBook

MULTICLASS_PENALTY_PERCENT = 20
MAX_ITERATIVE_ATTACKS = 4


def _check_level(level: int) -> None:
    if level < 0:
        raise OutOfRangeError(f"Class level cannot be negative: {level}")


def base_attack_bonus(progression: BabProgression, level: int) -> int:
    """Base attack bonus for levels in a single class.

    Args:
        progression: The class's BAB progression.
        level: Levels taken in that class.

    Returns:
        The class's contribution to base attack bonus.

    Raises:
        OutOfRangeError: If level is negative.
        ValueError: If progression is not a known progression.
    """
    _check_level(level)
    progression = BabProgression(progression)
    match progression:
        case BabProgression.FULL:
            return level
        case BabProgression.MEDIUM:
            return level * 3 // 4
        case BabProgression.POOR:
            return level // 2
        case _:
            assert_never(progression)


def saving_throw_base(progression: SaveProgression, level: int) -> int:
    """Base save bonus for levels in a single class.

    Args:
        progression: Good or poor progression for this save.
        level: Levels taken in that class.

    Returns:
        The class's contribution to the save.
    """
    _check_level(level)
    progression = SaveProgression(progression)
    match progression:
        case SaveProgression.GOOD:
            return 2 + level // 2
        case SaveProgression.POOR:
            return level // 3
        case _:
            assert_never(progression)


def skill_points_at_level(
    class_base: int,
    int_modifier: int,
    level: int,
    is_first_level: bool,
) -> int:
    """Skill points gained for one level.

    The first character level quadruples the usual amount with a floor of 4;
    every later level grants at least 1.

    Args:
        class_base: The class's skill points per level.
        int_modifier: Intelligence modifier.
        level: The level being gained.
        is_first_level: True for the first character level.

    Returns:
        Skill points for that level.
    """
    _check_level(level)
    if is_first_level:
        return max(4, (class_base + int_modifier) * 4)
    return max(1, class_base + int_modifier)


def character_level(classes: list[ClassLevel]) -> int:
    """Total levels across all classes."""
    return sum(entry.level for entry in classes)


def levels_by_class(classes: list[ClassLevel]) -> dict[str, int]:
    """Collapse the ordered class list into class key -> total levels."""
    totals: dict[str, int] = {}
    for entry in classes:
        totals[entry.class_key] = totals.get(entry.class_key, 0) + entry.level
    return totals


def total_base_attack_bonus(classes: list[ClassLevel], rules: RuleBook) -> int:
    """Multiclass BAB: each class through its own progression at its own level, summed."""
    return sum(
        base_attack_bonus(rules.character_class(key).bab_progression, level)
        for key, level in levels_by_class(classes).items()
    )


def total_save_bases(classes: list[ClassLevel], rules: RuleBook) -> dict[Save, int]:
    """Multiclass base saves, summed per class like BAB."""
    totals = {save: 0 for save in Save}
    for key, level in levels_by_class(classes).items():
        class_def = rules.character_class(key)
        for save in Save:
            totals[save] += saving_throw_base(class_def.saves.progression(save), level)
    return totals


def iterative_attacks(bab: int) -> list[int]:
    """Attack bonuses of a full attack: BAB, then -5 steps while still positive."""
    attacks = [bab]
    while attacks[-1] - 5 > 0 and len(attacks) < MAX_ITERATIVE_ATTACKS:
        attacks.append(attacks[-1] - 5)
    return attacks


def skill_points_available(build: CharacterBuild, rules: RuleBook, int_modifier: int) -> int:
    """Total skill points earned over every level of the build.

    Levels are walked in the order the classes were taken; only the very
    first level gets the x4 multiplier. Racial bonus points are added on top.
    """
    race = rules.race(build.race)
    total = 0
    first = True
    for entry in build.classes:
        class_def = rules.character_class(entry.class_key)
        for level in range(1, entry.level + 1):
            total += skill_points_at_level(class_def.skill_points, int_modifier, level, first)
            first = False

    level = character_level(build.classes)
    if level >= 1:
        total += race.bonus_skill_points_first_level
        total += race.bonus_skill_points_per_level * (level - 1)
    return total


def experience_for_level(level: int, table: list[int]) -> int:
    """XP needed to reach a character level.

    Levels past the end of the table follow the SRD formula 500 * n * (n - 1).

    Raises:
        OutOfRangeError: If level is below 1.
    """
    if level < 1:
        raise OutOfRangeError(f"Character level must be at least 1: {level}")
    if level <= len(table):
        return table[level - 1]
    return 500 * level * (level - 1)


def experience_progress(level: int, table: list[int]) -> ExperienceProgress:
    """XP threshold of the current level and the next."""
    return ExperienceProgress(
        level=level,
        current=experience_for_level(level, table),
        next=experience_for_level(level + 1, table),
    )


def multiclass_xp_penalty(build: CharacterBuild, rules: RuleBook) -> int:
    """XP penalty, in percent, for uneven multiclassing.

    Each class two or more levels below the highest class costs 20%. The
    race's favored class is ignored; a favored class of "any" means the
    highest-level class is ignored.
    """
    levels = levels_by_class(build.classes)
    favored = rules.race(build.race).favored_class

    if favored == "any":
        if levels:
            highest_key = max(levels, key=levels.get)
            levels.pop(highest_key)
    else:
        levels.pop(favored, None)

    if len(levels) < 2:
        return 0
    highest = max(levels.values())
    lagging = sum(1 for level in levels.values() if highest - level >= 2)
    return lagging * MULTICLASS_PENALTY_PERCENT


def feat_slots(build: CharacterBuild, rules: RuleBook) -> int:
    """Number of feats the build may select.

    One at 1st level and every third level, plus racial bonus feats and
    class bonus feats gained so far.
    """
    level = character_level(build.classes)
    if level < 1:
        return 0
    slots = 1 + level // 3 + rules.race(build.race).bonus_feats
    for key, class_level in levels_by_class(build.classes).items():
        bonus_levels = rules.character_class(key).bonus_feat_levels
        slots += sum(1 for at in bonus_levels if at <= class_level)
    return slots
