"""Character-level rules: derive every statistic and validate whole builds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config import DEFAULT_HP_POLICY
from engine.abilities import (
    ability_modifiers,
    final_ability_scores,
    validate_ability_range,
    validate_point_buy,
)
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
from engine.encumbrance import (
    carried_weight,
    carrying_capacity,
    encumbered_speed,
    load_level,
    penalties_for,
)
from engine.equipment import (
    arcane_spell_failure,
    armor_check_penalty,
    armor_max_dex,
    equipped_armor,
    equipped_shield,
    validate_inventory,
)
from engine.feats import feat_bonuses, validate_feats
from engine.progression import (
    character_level,
    experience_progress,
    feat_slots,
    levels_by_class,
    multiclass_xp_penalty,
    skill_points_available,
    total_base_attack_bonus,
)
from engine.skills import skill_points_spent, skill_totals, validate_skill_ranks
from engine.spells import spell_slots, validate_prepared_spells
from models.results import DerivedStats, LoadLevel, ValidationResult
from models.rules import Ability, Alignment, AlignmentRestriction

if TYPE_CHECKING:
    from models.characters import CharacterBuild
    from models.rules import RuleBook

logger = logging.getLogger(__name__)

ABILITY_INCREASE_INTERVAL = 4
SLOW_ARMOR_TYPES = ("medium", "heavy")
LOAD_IMMUNE_ABILITY = "speed_unaffected_by_load"

# Alignment -> (law/chaos component, good/evil component)
ALIGNMENT_AXES: dict[Alignment, tuple[str, str]] = {
    Alignment.LAWFUL_GOOD: ("lawful", "good"),
    Alignment.NEUTRAL_GOOD: ("neutral", "good"),
    Alignment.CHAOTIC_GOOD: ("chaotic", "good"),
    Alignment.LAWFUL_NEUTRAL: ("lawful", "neutral"),
    Alignment.TRUE_NEUTRAL: ("neutral", "neutral"),
    Alignment.CHAOTIC_NEUTRAL: ("chaotic", "neutral"),
    Alignment.LAWFUL_EVIL: ("lawful", "evil"),
    Alignment.NEUTRAL_EVIL: ("neutral", "evil"),
    Alignment.CHAOTIC_EVIL: ("chaotic", "evil"),
}


def check_alignment(alignment: Alignment, restriction: AlignmentRestriction) -> bool:
    """Whether an alignment satisfies a class's alignment restriction."""
    alignment = Alignment(alignment)
    law, moral = ALIGNMENT_AXES[alignment]
    restriction = AlignmentRestriction(restriction)

    if restriction == AlignmentRestriction.ANY:
        return True
    if restriction == AlignmentRestriction.NONLAWFUL:
        return law != "lawful"
    if restriction == AlignmentRestriction.NEUTRAL:
        return law == "neutral" or moral == "neutral"
    if restriction == AlignmentRestriction.LAWFUL:
        return law == "lawful"
    return alignment == Alignment.LAWFUL_GOOD


def derive_stats(
    build: CharacterBuild,
    rules: RuleBook,
    hp_policy: HpPolicy = DEFAULT_HP_POLICY,
) -> DerivedStats:
    """Compute every derived statistic of a build.

    Pure: the same build and rulebook always give the same result.

    Args:
        build: The character build.
        rules: The rulebook.
        hp_policy: How hit dice after the first level are counted.

    Returns:
        DerivedStats.

    Raises:
        UnknownReferenceError: If the build names a key missing from the rulebook.
        OutOfRangeError: If rolled hit points are missing or impossible.
    """
    race = rules.race(build.race)
    scores = final_ability_scores(build, rules)
    mods = ability_modifiers(scores)
    level = character_level(build.classes)
    bab = total_base_attack_bonus(build.classes, rules)
    feats = feat_bonuses(build.feats, rules)

    # Load
    weight = carried_weight(build.inventory, rules)
    # Racial penalties can push Strength below zero; validate_build reports that
    capacity = carrying_capacity(max(scores.strength, 0), race.size)
    load = load_level(weight, capacity)
    load_penalties = penalties_for(load)

    # Armor
    armor = equipped_armor(build.inventory, rules)
    shield = equipped_shield(build.inventory, rules)
    dex_caps = [
        cap for cap in (armor_max_dex(build.inventory, rules), load_penalties.max_dex_bonus)
        if cap is not None
    ]
    check_penalty = min(armor_check_penalty(build.inventory, rules), load_penalties.check_penalty)

    ac = armor_class(
        armor_bonus=armor.armor_bonus if armor else 0,
        shield_bonus=shield.shield_bonus if shield else 0,
        dex_modifier=mods[Ability.DEXTERITY],
        size_modifier=size_modifier(race.size),
        dodge=feats.armor_class,
        other=build.misc_ac,
        max_dex_bonus=min(dex_caps) if dex_caps else None,
    )

    levels = [(die, mods[Ability.CONSTITUTION]) for die in hit_dice(build.classes, rules)]
    hp = hit_points(levels, hp_policy, build.hit_point_rolls)
    if levels:
        hp += feats.hit_points

    slowed = load_penalties.speed_reduced or (armor is not None and armor.armor_type in SLOW_ARMOR_TYPES)
    if load == LoadLevel.OVERLOADED:
        speed = encumbered_speed(race.speed, load)
    elif slowed and LOAD_IMMUNE_ABILITY not in race.special_abilities:
        speed = encumbered_speed(race.speed, LoadLevel.MEDIUM)
    else:
        speed = race.speed

    stats = DerivedStats(
        name=build.name,
        race=race.key,
        size=race.size,
        character_level=level,
        ability_scores=scores,
        ability_modifiers=mods,
        base_attack_bonus=bab,
        hit_points=hp,
        armor_class=ac,
        attacks=attack_bonuses(bab, mods[Ability.STRENGTH], mods[Ability.DEXTERITY], race.size),
        saving_throws=saving_throws(
            build.classes,
            mods,
            rules,
            misc=build.misc_saves + race.save_bonus,
            save_bonuses=feats.saves,
        ),
        initiative=initiative(mods[Ability.DEXTERITY], feats.initiative),
        speed=speed,
        skills=skill_totals(build, rules, mods, check_penalty, feats.skills),
        skill_points_available=skill_points_available(build, rules, mods[Ability.INTELLIGENCE]),
        skill_points_spent=skill_points_spent(build, rules),
        feat_slots=feat_slots(build, rules),
        carrying_capacity=capacity,
        carried_weight=weight,
        load=load,
        load_penalties=load_penalties,
        armor_check_penalty=check_penalty,
        arcane_spell_failure=arcane_spell_failure(build.inventory, rules),
        spell_slots=spell_slots(build, rules, scores),
        experience=experience_progress(max(level, 1), rules.experience_by_level),
        multiclass_xp_penalty=multiclass_xp_penalty(build, rules),
    )
    logger.debug("Derived stats for %s (level %d %s)", build.name, level, race.key)
    return stats


def validate_build(
    build: CharacterBuild,
    rules: RuleBook,
    budget: int | None = None,
) -> ValidationResult:
    """Check a whole build and collect every violation.

    Args:
        build: The character build.
        rules: The rulebook.
        budget: Point-buy budget to check base scores against, or None to skip.

    Returns:
        ValidationResult listing every problem found.

    Raises:
        UnknownReferenceError: If the build names a key missing from the rulebook.
    """
    race = rules.race(build.race)
    violations = []

    if not build.classes:
        violations.append("At least one class level is required")
    for entry in build.classes:
        class_def = rules.character_class(entry.class_key)
        if entry.level < 1:
            violations.append(f"{class_def.name} level must be at least 1 (got {entry.level})")
    if violations:
        return ValidationResult(valid=False, violations=violations)

    if budget is not None:
        violations.extend(validate_point_buy(build.ability_scores, budget).violations)

    scores = final_ability_scores(build, rules)
    violations.extend(validate_ability_range(scores))

    for key in levels_by_class(build.classes):
        class_def = rules.character_class(key)
        if not check_alignment(build.alignment, class_def.alignment_restriction):
            violations.append(
                f"{class_def.name} requires a {class_def.alignment_restriction.value.replace('_', ' ')} "
                f"alignment, not {build.alignment.value.replace('_', ' ')}"
            )

    level = character_level(build.classes)
    allowed_increases = level // ABILITY_INCREASE_INTERVAL
    if len(build.ability_increases) > allowed_increases:
        violations.append(
            f"{len(build.ability_increases)} ability increases chosen, "
            f"only {allowed_increases} allowed at level {level}"
        )

    dice = hit_dice(build.classes, rules)
    if len(build.hit_point_rolls) > len(dice) - 1:
        violations.append(
            f"{len(build.hit_point_rolls)} hit point rolls given for {len(dice) - 1} levels after the first"
        )
    for value, die in zip(build.hit_point_rolls, dice[1:]):
        if not 1 <= value <= die:
            violations.append(f"Hit point roll {value} is impossible on a d{die}")

    violations.extend(validate_skill_ranks(build, rules, scores.modifier(Ability.INTELLIGENCE)))
    violations.extend(validate_feats(build, rules))
    violations.extend(validate_inventory(build.inventory, rules))
    violations.extend(validate_prepared_spells(build, rules, scores))

    logger.info("Validated %s (%s, level %d): %d violations", build.name, race.key, level, len(violations))
    return ValidationResult(valid=not violations, violations=violations)
