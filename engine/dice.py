"""Dice rolling for ability generation, hit points and starting gold."""

import random
import re

from pydantic import BaseModel

# NdS, optionally keeping the K highest dice, plus an optional flat modifier
DICE_PATTERN = re.compile(r"^(\d+)d(\d+)(?:k(\d+))?([+-]\d+)?$")


class DiceResult(BaseModel):
    """Outcome of one dice expression."""
    notation: str
    rolls: list[int]                # Dice that count toward the total
    dropped: list[int] = []         # Dice discarded by a keep-highest roll
    modifier: int = 0
    total: int


def roll(notation: str, rng: random.Random | None = None) -> DiceResult:
    """Roll a dice expression such as '3d6', '1d8+2' or '4d6k3'.

    A 'kN' suffix keeps only the N highest dice; the kept dice are then
    reported highest first. Without it, rolls are in the order thrown.

    Args:
        notation: Dice expression. Case and surrounding whitespace are ignored.
        rng: Random instance to draw from; pass a seeded one for repeatable rolls.

    Returns:
        DiceResult with the counted and dropped dice, modifier and total.

    Raises:
        ValueError: If the expression is malformed, has no dice or faces,
            or keeps more dice than it rolls.
    """
    rng = rng or random.Random()
    notation = notation.strip().lower()

    match = DICE_PATTERN.match(notation)
    if not match:
        raise ValueError(f"Invalid dice notation: {notation}")

    count, faces = int(match.group(1)), int(match.group(2))
    keep = int(match.group(3)) if match.group(3) else None
    modifier = int(match.group(4)) if match.group(4) else 0
    if count < 1 or faces < 1:
        raise ValueError(f"Dice notation needs at least one die with one face: {notation}")
    if keep is not None and not 1 <= keep <= count:
        raise ValueError(f"Cannot keep {keep} of {count} dice")

    rolls = [rng.randint(1, faces) for _ in range(count)]
    dropped = []
    if keep is not None:
        rolls = sorted(rolls, reverse=True)
        rolls, dropped = rolls[:keep], rolls[keep:]

    return DiceResult(
        notation=notation,
        rolls=rolls,
        dropped=dropped,
        modifier=modifier,
        total=sum(rolls) + modifier,
    )


def roll_keep_highest(
    num_dice: int,
    die_size: int,
    keep: int,
    rng: random.Random | None = None,
) -> DiceResult:
    """Roll num_dice dice of die_size faces and count only the keep highest."""
    return roll(f"{num_dice}d{die_size}k{keep}", rng=rng)
