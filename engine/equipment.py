"""Inventory helpers: equipped gear, value, armor penalties and starting gold."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from engine.dice import roll
from models.rules import ItemCategory, Slot

if TYPE_CHECKING:
    from models.characters import InventoryEntry
    from models.rules import ClassDefinition, Item, RuleBook

MAX_HANDS = 2

# Slot -> hands needed to hold an item there
HANDS_USED = {
    Slot.MAIN_HAND: 1,
    Slot.OFF_HAND: 1,
    Slot.TWO_HANDS: 2,
    Slot.SHIELD: 1,
}


def equipped_items(
    inventory: list[InventoryEntry],
    rules: RuleBook,
    slot: Slot | None = None,
) -> list[Item]:
    """Catalog records of equipped entries, optionally limited to one slot."""
    items = []
    for entry in inventory:
        if not entry.equipped:
            continue
        item = rules.item(entry.item_key)
        if slot is None or item.slot == slot:
            items.append(item)
    return items


def equipped_armor(inventory: list[InventoryEntry], rules: RuleBook) -> Item | None:
    """The worn armor, if any."""
    armor = [item for item in equipped_items(inventory, rules) if item.category == ItemCategory.ARMOR]
    return armor[0] if armor else None


def equipped_shield(inventory: list[InventoryEntry], rules: RuleBook) -> Item | None:
    """The carried shield, if any."""
    shields = [item for item in equipped_items(inventory, rules) if item.category == ItemCategory.SHIELD]
    return shields[0] if shields else None


def armor_max_dex(inventory: list[InventoryEntry], rules: RuleBook) -> int | None:
    """Lowest max-dex cap among equipped armor and shield, or None."""
    caps = [
        item.max_dex_bonus
        for item in (equipped_armor(inventory, rules), equipped_shield(inventory, rules))
        if item is not None and item.max_dex_bonus is not None
    ]
    return min(caps) if caps else None


def armor_check_penalty(inventory: list[InventoryEntry], rules: RuleBook) -> int:
    """Combined armor check penalty of equipped armor and shield (zero or negative)."""
    return sum(
        item.armor_check_penalty
        for item in (equipped_armor(inventory, rules), equipped_shield(inventory, rules))
        if item is not None
    )


def arcane_spell_failure(inventory: list[InventoryEntry], rules: RuleBook) -> int:
    """Combined arcane spell failure chance, in percent."""
    return sum(
        item.arcane_spell_failure
        for item in (equipped_armor(inventory, rules), equipped_shield(inventory, rules))
        if item is not None
    )


def total_value(inventory: list[InventoryEntry], rules: RuleBook) -> float:
    """Market value of the inventory in gold pieces."""
    return sum(rules.item(entry.item_key).cost * entry.quantity for entry in inventory)


def validate_inventory(inventory: list[InventoryEntry], rules: RuleBook) -> list[str]:
    """Check quantities and equipped-slot conflicts.

    Unknown item keys raise UnknownReferenceError.
    """
    violations = []
    for entry in inventory:
        item = rules.item(entry.item_key)
        if entry.quantity < 1:
            violations.append(f"{item.name}: quantity must be at least 1 (got {entry.quantity})")
        if entry.equipped and item.slot == Slot.NONE:
            violations.append(f"{item.name} cannot be equipped")

    equipped = equipped_items(inventory, rules)
    armor = [item for item in equipped if item.slot == Slot.ARMOR]
    if len(armor) > 1:
        violations.append(f"Only one suit of armor can be worn ({len(armor)} equipped)")
    shields = [item for item in equipped if item.slot == Slot.SHIELD]
    if len(shields) > 1:
        violations.append(f"Only one shield can be carried ({len(shields)} equipped)")

    hands = sum(HANDS_USED.get(item.slot, 0) for item in equipped)
    if hands > MAX_HANDS:
        violations.append(f"Equipped items need {hands} hands")
    return violations


def roll_starting_wealth(class_def: ClassDefinition, rng: random.Random | None = None) -> int:
    """Roll a class's starting gold.

    Args:
        class_def: The character's first class.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        Starting gold in gp.
    """
    wealth = class_def.starting_wealth
    return roll(wealth.dice, rng=rng).total * wealth.multiplier
