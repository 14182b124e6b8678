"""Feat prerequisite checks and feat bonuses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from engine.abilities import final_ability_scores
from engine.progression import character_level, feat_slots, levels_by_class, total_base_attack_bonus
from engine.spells import caster_level
from models.results import PrerequisiteCheck
from models.rules import FeatEffects

if TYPE_CHECKING:
    from models.characters import CharacterBuild
    from models.rules import FeatDefinition, RuleBook

logger = logging.getLogger(__name__)


def check_prerequisites(
    feat: FeatDefinition,
    build: CharacterBuild,
    rules: RuleBook,
) -> PrerequisiteCheck:
    """Evaluate every prerequisite of a feat against a build.

    All categories are checked and every failure is listed, so the caller
    can show the whole gap at once. The feat itself never counts toward
    its own required feats.

    Args:
        feat: The feat being checked.
        build: The character build.
        rules: The rulebook.

    Returns:
        PrerequisiteCheck with eligible and the list of missing requirements.
    """
    prereqs = feat.prerequisites
    missing = []

    scores = final_ability_scores(build, rules)
    for ability, minimum in prereqs.ability_mins.items():
        score = scores.score(ability)
        if score < minimum:
            missing.append(f"{ability.value.capitalize()} {minimum} (has {score})")

    for skill, minimum in prereqs.skill_mins.items():
        ranks = build.skill_ranks.get(skill, 0)
        if ranks < minimum:
            missing.append(f"{minimum} ranks in {rules.skill(skill).name} (has {ranks})")

    if prereqs.bab_min:
        bab = total_base_attack_bonus(build.classes, rules)
        if bab < prereqs.bab_min:
            missing.append(f"Base attack bonus +{prereqs.bab_min} (has +{bab})")

    held = set(build.feats) - {feat.key}
    for required in prereqs.required_feats:
        if required not in held:
            missing.append(f"Feat: {rules.feat(required).name}")

    if prereqs.race_restriction and build.race not in prereqs.race_restriction:
        missing.append(f"Race: {' or '.join(prereqs.race_restriction)}")

    levels = levels_by_class(build.classes)
    if prereqs.class_restriction and not any(
        levels.get(key, 0) >= minimum for key, minimum in prereqs.class_restriction.items()
    ):
        options = " or ".join(f"{key} {minimum}" for key, minimum in prereqs.class_restriction.items())
        missing.append(f"Class level: {options}")

    if prereqs.min_level:
        level = character_level(build.classes)
        if level < prereqs.min_level:
            missing.append(f"Character level {prereqs.min_level} (has {level})")

    if prereqs.caster_level_min:
        best = max(
            (caster_level(rules.character_class(key), level) for key, level in levels.items()),
            default=0,
        )
        if best < prereqs.caster_level_min:
            missing.append(f"Caster level {prereqs.caster_level_min} (has {best})")

    return PrerequisiteCheck(feat=feat.key, eligible=not missing, missing=missing)


def available_feats(build: CharacterBuild, rules: RuleBook) -> list[FeatDefinition]:
    """Feats the build does not have yet and qualifies for."""
    return [
        feat
        for key, feat in rules.feats.items()
        if key not in build.feats and check_prerequisites(feat, build, rules).eligible
    ]


def validate_feats(build: CharacterBuild, rules: RuleBook) -> list[str]:
    """Check the selected feats.

    Unknown feat keys raise UnknownReferenceError. Duplicates, unmet
    prerequisites and more feats than slots are returned as violations.
    Prerequisites are judged against the whole build, so a feat may
    depend on another feat chosen alongside it.
    """
    violations = []
    seen = set()

    for key in build.feats:
        feat = rules.feat(key)
        if key in seen:
            violations.append(f"{feat.name} selected more than once")
            continue
        seen.add(key)
        check = check_prerequisites(feat, build, rules)
        if not check.eligible:
            violations.append(f"{feat.name} prerequisites not met: {', '.join(check.missing)}")

    slots = feat_slots(build, rules)
    if len(build.feats) > slots:
        violations.append(f"{len(build.feats)} feats selected, only {slots} available")

    if violations:
        logger.debug("Feats for %s have %d violations", build.name, len(violations))
    return violations


def feat_bonuses(feats: list[str], rules: RuleBook) -> FeatEffects:
    """Sum the static bonuses of a list of feats."""
    skills: dict[str, int] = {}
    saves: dict = {}
    hit_points = initiative = armor_class = 0

    for key in dict.fromkeys(feats):
        effects = rules.feat(key).effects
        for skill, bonus in effects.skills.items():
            skills[skill] = skills.get(skill, 0) + bonus
        for save, bonus in effects.saves.items():
            saves[save] = saves.get(save, 0) + bonus
        hit_points += effects.hit_points
        initiative += effects.initiative
        armor_class += effects.armor_class

    return FeatEffects(
        skills=skills,
        saves=saves,
        hit_points=hit_points,
        initiative=initiative,
        armor_class=armor_class,
    )
