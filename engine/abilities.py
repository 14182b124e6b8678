"""Ability scores: modifiers, point buy, racial adjustments and rolling."""

from __future__ import annotations

import random
from enum import Enum
from typing import TYPE_CHECKING

from config import ABILITY_SCORE_MAX, ABILITY_SCORE_MIN, DEFAULT_POINT_BUY_BUDGET
from engine.dice import roll, roll_keep_highest
from engine.errors import OutOfRangeError
from models.characters import AbilityScores
from models.results import PointBuyResult
from models.rules import Ability

if TYPE_CHECKING:
    from models.characters import CharacterBuild
    from models.rules import RaceDefinition, RuleBook

# Score -> point-buy cost (DMG standard table)
POINT_BUY_COSTS: dict[int, int] = {
    8: 0, 9: 1, 10: 2, 11: 3, 12: 4, 13: 5,
    14: 6, 15: 8, 16: 10, 17: 13, 18: 16,
}

STANDARD_ARRAY = (15, 14, 13, 12, 10, 8)


class RollMethod(str, Enum):
    """Ways to generate a set of six ability scores."""
    FOUR_D6_DROP_LOWEST = "4d6-drop-lowest"
    THREE_D6 = "3d6"
    STANDARD_ARRAY = "standard-array"


def modifier_of(score: int) -> int:
    """Calculate the ability modifier for a score.

    Args:
        score: Any integer ability score.

    Returns:
        (score - 10) // 2, e.g. -1 for 8 and +4 for 18.
    """
    return (score - 10) // 2


def ability_modifiers(scores: AbilityScores) -> dict[Ability, int]:
    """Modifier for each of the six abilities."""
    return {ability: modifier_of(scores.score(ability)) for ability in Ability}


def point_buy_cost(score: int, table: dict[int, int] = POINT_BUY_COSTS) -> int:
    """Look up what a score costs under point buy.

    Args:
        score: The score being purchased.
        table: Score -> cost table.

    Returns:
        The point cost.

    Raises:
        OutOfRangeError: If the score is not in the table.
    """
    if score not in table:
        raise OutOfRangeError(
            f"Score {score} cannot be bought (allowed {min(table)}-{max(table)})"
        )
    return table[score]


def validate_point_buy(
    scores: AbilityScores,
    budget: int = DEFAULT_POINT_BUY_BUDGET,
    table: dict[int, int] = POINT_BUY_COSTS,
) -> PointBuyResult:
    """Check six base scores against a point-buy budget.

    Every out-of-range ability is reported on its own, and an out-of-range
    score adds nothing to the total cost.

    Args:
        scores: Base ability scores, before racial adjustments.
        budget: Points available.
        table: Score -> cost table.

    Returns:
        PointBuyResult with the total cost, remaining points and violations.
    """
    total = 0
    violations = []

    for ability in Ability:
        score = scores.score(ability)
        try:
            total += point_buy_cost(score, table)
        except OutOfRangeError:
            violations.append(
                f"{ability.value.capitalize()} {score} is outside the point-buy "
                f"range {min(table)}-{max(table)}"
            )

    remaining = budget - total
    if remaining < 0:
        violations.append(f"Point buy costs {total}, over the budget of {budget} by {-remaining}")

    return PointBuyResult(
        valid=not violations,
        total_cost=total,
        remaining=remaining,
        violations=violations,
    )


def apply_racial_adjustments(scores: AbilityScores, race: RaceDefinition) -> AbilityScores:
    """Return new scores with the race's ability adjustments added."""
    data = scores.model_dump()
    for ability, delta in race.ability_adjustments.items():
        data[ability.value] += delta
    return AbilityScores(**data)


def apply_ability_increases(scores: AbilityScores, increases: list[Ability]) -> AbilityScores:
    """Return new scores with +1 for each level-based increase."""
    data = scores.model_dump()
    for ability in increases:
        data[Ability(ability).value] += 1
    return AbilityScores(**data)


def final_ability_scores(build: CharacterBuild, rules: RuleBook) -> AbilityScores:
    """Base scores plus racial adjustments plus level-based increases."""
    adjusted = apply_racial_adjustments(build.ability_scores, rules.race(build.race))
    return apply_ability_increases(adjusted, build.ability_increases)


def validate_ability_range(
    scores: AbilityScores,
    low: int = ABILITY_SCORE_MIN,
    high: int = ABILITY_SCORE_MAX,
) -> list[str]:
    """List every ability whose score falls outside [low, high]."""
    violations = []
    for ability in Ability:
        score = scores.score(ability)
        if not low <= score <= high:
            violations.append(
                f"{ability.value.capitalize()} {score} is outside the allowed range {low}-{high}"
            )
    return violations


def roll_ability_scores(
    method: RollMethod = RollMethod.FOUR_D6_DROP_LOWEST,
    rng: random.Random | None = None,
) -> list[int]:
    """Generate six ability scores.

    Args:
        method: Generation method.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        Six scores in the order they were generated.
    """
    rng = rng or random.Random()
    method = RollMethod(method)

    if method == RollMethod.FOUR_D6_DROP_LOWEST:
        return [roll_keep_highest(4, 6, 3, rng=rng).total for _ in range(6)]
    if method == RollMethod.THREE_D6:
        return [roll("3d6", rng=rng).total for _ in range(6)]
    return list(STANDARD_ARRAY)
