"""Skill ranks: caps, costs, synergies and totals."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config import SYNERGY_BONUS, SYNERGY_RANKS
from engine.errors import InsufficientPointsError, OutOfRangeError, RankCapExceededError
from engine.progression import character_level, levels_by_class, skill_points_available
from models.results import RankAllocation

if TYPE_CHECKING:
    from models.characters import CharacterBuild, ClassLevel
    from models.rules import Ability, RuleBook, Synergy

logger = logging.getLogger(__name__)

KNOWLEDGE_WILDCARD = "knowledge_all"


def max_ranks(level: int, is_class_skill: bool) -> int:
    """Maximum ranks at a character level: level + 3, halved for cross-class skills."""
    if is_class_skill:
        return level + 3
    return (level + 3) // 2


def rank_cost(is_class_skill: bool) -> int:
    """Skill points per rank: 1 for class skills, 2 for cross-class."""
    return 1 if is_class_skill else 2


def skill_total(
    ranks: int,
    ability_modifier: int,
    misc_bonus: int = 0,
    synergy_bonus: int = 0,
) -> int:
    """Skill check modifier."""
    return ranks + ability_modifier + misc_bonus + synergy_bonus


def allocate_rank(
    skill: str,
    requested_ranks: int,
    available_points: int,
    is_class_skill: bool,
    level: int,
) -> RankAllocation:
    """Buy ranks in a skill.

    Args:
        skill: Skill key.
        requested_ranks: Ranks wanted.
        available_points: Unspent skill points.
        is_class_skill: Whether the skill is a class skill for the character.
        level: Character level, which sets the rank cap.

    Returns:
        RankAllocation with the points spent.

    Raises:
        OutOfRangeError: If requested_ranks is negative.
        InsufficientPointsError: If the ranks cost more than available_points.
        RankCapExceededError: If requested_ranks exceeds max_ranks.
    """
    if requested_ranks < 0:
        raise OutOfRangeError(f"Ranks cannot be negative: {skill} {requested_ranks}")

    cost = requested_ranks * rank_cost(is_class_skill)
    if cost > available_points:
        raise InsufficientPointsError(
            f"{skill}: {requested_ranks} ranks cost {cost} points, only {available_points} available"
        )

    cap = max_ranks(level, is_class_skill)
    if requested_ranks > cap:
        kind = "class" if is_class_skill else "cross-class"
        raise RankCapExceededError(
            f"{skill}: {requested_ranks} ranks exceeds the {kind} maximum of {cap} at level {level}"
        )

    return RankAllocation(skill=skill, ranks=requested_ranks, points_spent=cost)


def synergy_bonus(
    target: str,
    ranks: dict[str, int],
    synergies: list[Synergy],
    threshold: int = SYNERGY_RANKS,
    bonus: int = SYNERGY_BONUS,
) -> int:
    """Synergy bonus to a skill: +2 for every source skill with 5 or more ranks."""
    return sum(
        bonus
        for synergy in synergies
        if synergy.target == target and ranks.get(synergy.source, 0) >= threshold
    )


def is_class_skill(skill: str, classes: list[ClassLevel], rules: RuleBook) -> bool:
    """True if the skill is a class skill for any of the character's classes."""
    for key in levels_by_class(classes):
        class_skills = rules.character_class(key).class_skills
        if skill in class_skills:
            return True
        if KNOWLEDGE_WILDCARD in class_skills and skill.startswith("knowledge_"):
            return True
    return False


def skill_points_spent(build: CharacterBuild, rules: RuleBook) -> int:
    """Points spent on the build's ranks, counting cross-class ranks double."""
    return sum(
        ranks * rank_cost(is_class_skill(skill, build.classes, rules))
        for skill, ranks in build.skill_ranks.items()
    )


def skill_totals(
    build: CharacterBuild,
    rules: RuleBook,
    modifiers: dict[Ability, int],
    armor_check_penalty: int = 0,
    feat_bonuses: dict[str, int] | None = None,
) -> dict[str, int]:
    """Check modifier for every skill the character can use.

    Trained-only skills with no ranks are left out. Armor check penalties
    apply to flagged skills (doubled for Swim).
    """
    race = rules.race(build.race)
    feat_bonuses = feat_bonuses or {}
    totals = {}

    for key, skill in rules.skills.items():
        ranks = build.skill_ranks.get(key, 0)
        if skill.trained_only and ranks == 0:
            continue
        ability_mod = modifiers[skill.key_ability] if skill.key_ability else 0
        misc = race.skill_bonuses.get(key, 0) + feat_bonuses.get(key, 0)
        if skill.armor_check:
            misc += armor_check_penalty * skill.armor_check_multiplier
        totals[key] = skill_total(
            ranks,
            ability_mod,
            misc,
            synergy_bonus(key, build.skill_ranks, rules.synergies),
        )
    return totals


def validate_skill_ranks(build: CharacterBuild, rules: RuleBook, int_modifier: int) -> list[str]:
    """Check every rank allocation against caps and available points.

    Unknown skill keys raise UnknownReferenceError; overspending and
    over-cap ranks are returned as violations. Points are checked once
    over the whole allocation, so the order of skill_ranks does not matter.
    """
    level = character_level(build.classes)
    available = skill_points_available(build, rules, int_modifier)
    spent = 0
    violations = []

    for skill, ranks in build.skill_ranks.items():
        rules.skill(skill)
        if ranks < 0:
            violations.append(f"{skill}: ranks cannot be negative ({ranks})")
            continue
        class_skill = is_class_skill(skill, build.classes, rules)
        cost = ranks * rank_cost(class_skill)
        spent += cost
        try:
            # Budget of its own cost leaves only the rank cap to check here
            allocate_rank(skill, ranks, cost, class_skill, level)
        except RankCapExceededError as exc:
            violations.append(str(exc))

    if spent > available:
        violations.append(f"{spent} skill points spent, only {available} available")

    if violations:
        logger.debug("Skill allocation for %s has %d violations", build.name, len(violations))
    return violations
