"""Encounter budgets and random encounter assembly."""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING

from config import MAX_MONSTERS_PER_ENCOUNTER
from engine.errors import OutOfRangeError
from models.results import Encounter

if TYPE_CHECKING:
    from models.rules import Monster, RuleBook

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    """How hard an encounter should be relative to the party."""
    EASY = "easy"
    AVERAGE = "average"
    CHALLENGING = "challenging"
    HARD = "hard"
    DEADLY = "deadly"


DIFFICULTY_MODIFIERS: dict[Difficulty, int] = {
    Difficulty.EASY: -1,
    Difficulty.AVERAGE: 0,
    Difficulty.CHALLENGING: 1,
    Difficulty.HARD: 2,
    Difficulty.DEADLY: 4,
}


def target_challenge_rating(party_average_level: int, difficulty_modifier: int, party_size: int) -> int:
    """Challenge rating to aim for.

    Average level plus the difficulty modifier, then -1 for parties under
    four, +1 for parties over five and another +1 over six. Never below 1.

    Args:
        party_average_level: Average character level of the party.
        difficulty_modifier: See DIFFICULTY_MODIFIERS.
        party_size: Number of characters.

    Returns:
        Target challenge rating.
    """
    cr = party_average_level + difficulty_modifier
    if party_size < 4:
        cr -= 1
    if party_size > 5:
        cr += 1
    if party_size > 6:
        cr += 1
    return max(1, cr)


def experience_for_cr(cr: float, table: dict[float, int]) -> int:
    """XP value of a challenge rating.

    Ratings above the table double every two steps. CR 0 is worth nothing.

    Raises:
        OutOfRangeError: For a negative rating or a fraction not in the table.
    """
    if cr < 0:
        raise OutOfRangeError(f"Challenge rating cannot be negative: {cr}")
    if cr == 0:
        return 0
    if cr in table:
        return table[cr]
    top = max(table)
    if cr > top:
        return int(table[top] * 2 ** ((cr - top) / 2))
    raise OutOfRangeError(f"No experience value for challenge rating {cr}")


def treasure_for_level(level: int, table: list[int]) -> int:
    """Treasure value per encounter, in gp. Levels past the table use its last row."""
    if level < 1:
        raise OutOfRangeError(f"Encounter level must be at least 1: {level}")
    return table[min(level, len(table)) - 1]


def monsters_for_environment(rules: RuleBook, environment: str | None = None) -> list[Monster]:
    """Monsters found in an environment, or every monster when none is given."""
    if environment is None:
        return list(rules.monsters.values())
    return [m for m in rules.monsters.values() if environment in m.environments]


def build_encounter(
    target_cr: int,
    budget_table: dict[float, int],
    available_monsters: list[Monster],
    rng: random.Random | None = None,
    max_monsters: int = MAX_MONSTERS_PER_ENCOUNTER,
) -> list[Monster]:
    """Greedily fill an XP budget with monsters.

    The budget is the XP value of the target CR. Each step takes a monster
    with the highest cost that still fits, choosing uniformly among equal
    costs. Stops when the budget is spent, nothing fits, or max_monsters is
    reached. Monsters worth no XP are never picked.

    Args:
        target_cr: Target challenge rating.
        budget_table: Challenge rating -> XP table.
        available_monsters: Candidates to choose from.
        rng: Random instance; pass a seeded one for reproducible results.
        max_monsters: Upper bound on the number of monsters.

    Returns:
        Chosen monsters, most expensive first. Their total cost never
        exceeds the budget.
    """
    rng = rng or random.Random()
    remaining = experience_for_cr(target_cr, budget_table)

    costed = [(monster, experience_for_cr(monster.challenge_rating, budget_table)) for monster in available_monsters]
    costed = [(monster, cost) for monster, cost in costed if cost > 0]

    chosen = []
    while remaining > 0 and len(chosen) < max_monsters:
        affordable = [(monster, cost) for monster, cost in costed if cost <= remaining]
        if not affordable:
            break
        best = max(cost for _, cost in affordable)
        pick = rng.choice([monster for monster, cost in affordable if cost == best])
        chosen.append(pick)
        remaining -= best
    return chosen


def generate_encounter(
    party_levels: list[int],
    difficulty: Difficulty,
    rules: RuleBook,
    environment: str | None = None,
    rng: random.Random | None = None,
    max_monsters: int = MAX_MONSTERS_PER_ENCOUNTER,
) -> Encounter:
    """Build a complete encounter for a party.

    Args:
        party_levels: Character level of each party member.
        difficulty: Desired difficulty.
        rules: The rulebook.
        environment: Restrict monsters to this environment.
        rng: Random instance; pass a seeded one for reproducible results.
        max_monsters: Upper bound on the number of monsters.

    Returns:
        Encounter with its monsters, XP total and treasure.

    Raises:
        OutOfRangeError: If the party is empty.
    """
    if not party_levels:
        raise OutOfRangeError("A party needs at least one character")
    difficulty = Difficulty(difficulty)

    average_level = sum(party_levels) // len(party_levels)
    target = target_challenge_rating(average_level, DIFFICULTY_MODIFIERS[difficulty], len(party_levels))
    budget = experience_for_cr(target, rules.cr_experience)

    candidates = monsters_for_environment(rules, environment)
    monsters = build_encounter(target, rules.cr_experience, candidates, rng=rng, max_monsters=max_monsters)
    total_xp = sum(experience_for_cr(m.challenge_rating, rules.cr_experience) for m in monsters)

    logger.info(
        "Encounter for party of %d (avg level %d, %s): CR %d, %d monsters, %d/%d XP",
        len(party_levels),
        average_level,
        difficulty.value,
        target,
        len(monsters),
        total_xp,
        budget,
    )
    return Encounter(
        target_cr=target,
        challenge_rating_budget=budget,
        monsters=monsters,
        total_xp=total_xp,
        treasure_value=treasure_for_level(target, rules.treasure_per_encounter),
        environment=environment,
        difficulty=difficulty.value,
    )
