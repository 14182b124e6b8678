"""Carrying capacity and load."""

from __future__ import annotations

from typing import TYPE_CHECKING

from engine.errors import OutOfRangeError
from models.results import CarryingCapacity, LoadLevel, LoadPenalties
from models.rules import Size

if TYPE_CHECKING:
    from models.characters import InventoryEntry
    from models.rules import RuleBook

# Strength 1-29 -> heavy load in pounds (SRD carrying capacity table)
HEAVY_LOADS = (
    10, 20, 30, 40, 50, 60, 70, 80, 90, 100,
    115, 130, 150, 175, 200, 230, 260, 300, 350, 400,
    460, 520, 600, 700, 800, 920, 1040, 1200, 1400,
)

# Biped carrying capacity multipliers by size
SIZE_CARRY_MULTIPLIERS: dict[Size, float] = {
    Size.FINE: 1 / 8,
    Size.DIMINUTIVE: 1 / 4,
    Size.TINY: 1 / 2,
    Size.SMALL: 3 / 4,
    Size.MEDIUM: 1,
    Size.LARGE: 2,
    Size.HUGE: 4,
    Size.GARGANTUAN: 8,
    Size.COLOSSAL: 16,
}

LOAD_PENALTIES: dict[LoadLevel, LoadPenalties] = {
    LoadLevel.LIGHT: LoadPenalties(load=LoadLevel.LIGHT),
    LoadLevel.MEDIUM: LoadPenalties(
        load=LoadLevel.MEDIUM, max_dex_bonus=3, check_penalty=-3, speed_reduced=True
    ),
    LoadLevel.HEAVY: LoadPenalties(
        load=LoadLevel.HEAVY, max_dex_bonus=1, check_penalty=-6, speed_reduced=True, run_multiplier=3
    ),
    LoadLevel.OVERLOADED: LoadPenalties(
        load=LoadLevel.OVERLOADED, max_dex_bonus=0, check_penalty=-6, speed_reduced=True, run_multiplier=0
    ),
}

OVERLOADED_SPEED = 5                # Can only stagger 5 feet


def _table_row(strength: int) -> tuple[int, int]:
    """Table Strength to read and the power of four to scale it by."""
    if strength <= len(HEAVY_LOADS):
        return strength, 0
    # Each +10 Strength quadruples every limit of the score ten lower
    tens, offset = divmod(strength - 20, 10)
    return 20 + offset, tens


def carrying_capacity(strength: int, size: Size = Size.MEDIUM) -> CarryingCapacity:
    """Light, medium and heavy load limits for a Strength score.

    Args:
        strength: Strength score. Scores above 29 are extrapolated.
        size: Creature size; scales the limits for bipeds.

    Returns:
        CarryingCapacity in pounds. Strength 0 can carry nothing.

    Raises:
        OutOfRangeError: If strength is negative.
    """
    if strength < 0:
        raise OutOfRangeError(f"Strength cannot be negative: {strength}")
    if strength == 0:
        return CarryingCapacity(light=0, medium=0, heavy=0)

    row, tens = _table_row(strength)
    heavy = int(HEAVY_LOADS[row - 1] * SIZE_CARRY_MULTIPLIERS[Size(size)])
    scale = 4 ** tens
    return CarryingCapacity(
        light=heavy // 3 * scale,
        medium=heavy * 2 // 3 * scale,
        heavy=heavy * scale,
    )


def load_level(weight: float, capacity: CarryingCapacity) -> LoadLevel:
    """Classify a carried weight. A weight equal to a limit stays in that load."""
    if weight > capacity.heavy:
        return LoadLevel.OVERLOADED
    if weight > capacity.medium:
        return LoadLevel.HEAVY
    if weight > capacity.light:
        return LoadLevel.MEDIUM
    return LoadLevel.LIGHT


def penalties_for(load: LoadLevel) -> LoadPenalties:
    """Max Dex, check penalty and speed effects of a load."""
    return LOAD_PENALTIES[LoadLevel(load)]


def encumbered_speed(base_speed: int, load: LoadLevel) -> int:
    """Speed after load: 30 ft drops to 20, 20 ft to 15, and so on."""
    penalties = penalties_for(load)
    if penalties.load == LoadLevel.OVERLOADED:
        return min(base_speed, OVERLOADED_SPEED)
    if not penalties.speed_reduced:
        return base_speed
    blocks, rest = divmod(base_speed, 30)
    return blocks * 20 + {0: 0, 5: 5, 10: 10, 15: 10, 20: 15, 25: 20}.get(rest, rest)


def carried_weight(inventory: list[InventoryEntry], rules: RuleBook) -> float:
    """Total weight of everything in the inventory, equipped or not."""
    return sum(rules.item(entry.item_key).weight * entry.quantity for entry in inventory)
