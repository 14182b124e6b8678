"""Result records returned by the calculators and validators."""

from enum import Enum

from pydantic import BaseModel

from models.characters import AbilityScores
from models.rules import Ability, Monster, Size


class LoadLevel(str, Enum):
    """Encumbrance categories, lightest first."""
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    OVERLOADED = "overloaded"


class ValidationResult(BaseModel):
    """Outcome of a validation pass."""
    valid: bool
    violations: list[str] = []


class PointBuyResult(BaseModel):
    """Outcome of checking ability scores against a point-buy budget."""
    valid: bool
    total_cost: int
    remaining: int                  # Negative when over budget
    violations: list[str] = []


class RankAllocation(BaseModel):
    """A successful skill rank purchase."""
    success: bool = True
    skill: str
    ranks: int
    points_spent: int


class PrerequisiteCheck(BaseModel):
    """Whether a build qualifies for a feat, and every reason it does not."""
    feat: str
    eligible: bool
    missing: list[str] = []


class ArmorClassBreakdown(BaseModel):
    """Armor class totals and their parts."""
    total: int
    touch: int                      # No armor, shield or natural armor
    flat_footed: int                # No Dex or dodge bonus
    armor_bonus: int = 0
    shield_bonus: int = 0
    dex_bonus: int = 0              # After the max-dex clamp
    size_modifier: int = 0
    deflection: int = 0
    dodge: int = 0
    natural: int = 0
    other: int = 0


class AttackBonuses(BaseModel):
    """Attack bonuses for a full attack."""
    base_attack_bonus: int
    melee: int
    ranged: int
    grapple: int
    iterative: list[int]            # Melee bonus for each attack of a full attack


class SavingThrows(BaseModel):
    """Save totals."""
    fortitude: int
    reflex: int
    will: int


class CarryingCapacity(BaseModel):
    """Maximum weight, in pounds, for each load."""
    light: int
    medium: int
    heavy: int


class LoadPenalties(BaseModel):
    """Effects of carrying a given load."""
    load: LoadLevel
    max_dex_bonus: int | None = None  # None means no cap
    check_penalty: int = 0
    speed_reduced: bool = False
    run_multiplier: int = 4


class ExperienceProgress(BaseModel):
    """XP threshold of the current level and the next one."""
    level: int
    current: int
    next: int


class Encounter(BaseModel):
    """A generated encounter."""
    target_cr: int
    challenge_rating_budget: int    # XP available to spend on monsters
    monsters: list[Monster] = []
    total_xp: int = 0
    treasure_value: int = 0         # gp
    environment: str | None = None
    difficulty: str | None = None


class DerivedStats(BaseModel):
    """All numbers derived from a build. Recomputed on every request."""
    name: str
    race: str
    size: Size
    character_level: int
    ability_scores: AbilityScores   # After racial adjustments and increases
    ability_modifiers: dict[Ability, int]
    base_attack_bonus: int
    hit_points: int
    armor_class: ArmorClassBreakdown
    attacks: AttackBonuses
    saving_throws: SavingThrows
    initiative: int
    speed: int
    skills: dict[str, int]
    skill_points_available: int
    skill_points_spent: int
    feat_slots: int
    carrying_capacity: CarryingCapacity
    carried_weight: float
    load: LoadLevel
    load_penalties: LoadPenalties
    armor_check_penalty: int
    arcane_spell_failure: int
    spell_slots: dict[str, list[int]] = {}
    experience: ExperienceProgress
    multiclass_xp_penalty: int = 0  # Percent
