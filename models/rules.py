"""Reference-data models: the SRD tables a character is built from."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from engine.errors import UnknownReferenceError


class Ability(str, Enum):
    """The six ability scores."""
    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"


class Save(str, Enum):
    """The three saving throws."""
    FORTITUDE = "fortitude"
    REFLEX = "reflex"
    WILL = "will"


class Size(str, Enum):
    """Creature size categories."""
    FINE = "fine"
    DIMINUTIVE = "diminutive"
    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    HUGE = "huge"
    GARGANTUAN = "gargantuan"
    COLOSSAL = "colossal"


class BabProgression(str, Enum):
    """Base attack bonus progression of a class."""
    FULL = "full"                   # level
    MEDIUM = "medium"               # 3/4 level
    POOR = "poor"                   # 1/2 level


class SaveProgression(str, Enum):
    """Progression of a single saving throw."""
    GOOD = "good"                   # 2 + level/2
    POOR = "poor"                   # level/3


class Alignment(str, Enum):
    """The nine alignments."""
    LAWFUL_GOOD = "lawful_good"
    NEUTRAL_GOOD = "neutral_good"
    CHAOTIC_GOOD = "chaotic_good"
    LAWFUL_NEUTRAL = "lawful_neutral"
    TRUE_NEUTRAL = "true_neutral"
    CHAOTIC_NEUTRAL = "chaotic_neutral"
    LAWFUL_EVIL = "lawful_evil"
    NEUTRAL_EVIL = "neutral_evil"
    CHAOTIC_EVIL = "chaotic_evil"


class AlignmentRestriction(str, Enum):
    """Alignment requirement a class places on its members."""
    ANY = "any"
    NONLAWFUL = "nonlawful"
    NEUTRAL = "neutral"             # at least one neutral component
    LAWFUL = "lawful"
    LAWFUL_GOOD = "lawful_good"


class ItemCategory(str, Enum):
    """Broad item categories."""
    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"
    GEAR = "gear"


class Slot(str, Enum):
    """Where an equipped item is worn or held."""
    ARMOR = "armor"
    SHIELD = "shield"
    MAIN_HAND = "main_hand"
    OFF_HAND = "off_hand"
    TWO_HANDS = "two_hands"
    NONE = "none"


class RaceDefinition(BaseModel):
    """A playable race."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    size: Size = Size.MEDIUM
    speed: int = 30                 # Base land speed in feet
    ability_adjustments: dict[Ability, int] = {}
    favored_class: str = "any"      # Class key, or "any" for the highest-level class
    languages: list[str] = []
    bonus_languages: list[str] = []
    special_abilities: list[str] = []
    bonus_feats: int = 0            # Extra feats at 1st level
    bonus_skill_points_first_level: int = 0
    bonus_skill_points_per_level: int = 0
    save_bonus: int = 0             # Racial bonus to all saves
    skill_bonuses: dict[str, int] = {}


class ClassSaves(BaseModel):
    """Save progressions of a class."""
    model_config = ConfigDict(frozen=True)

    fortitude: SaveProgression
    reflex: SaveProgression
    will: SaveProgression

    def progression(self, save: Save) -> SaveProgression:
        return getattr(self, save.value)


class StartingWealth(BaseModel):
    """Starting gold: roll the dice and multiply."""
    model_config = ConfigDict(frozen=True)

    dice: str                       # e.g., "5d4"
    multiplier: int = 10


class ClassDefinition(BaseModel):
    """A base class."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    hit_die: int                    # e.g., 10 for d10
    bab_progression: BabProgression
    saves: ClassSaves
    skill_points: int               # Per level, before Int modifier
    class_skills: list[str] = []    # "knowledge_all" covers every Knowledge skill
    alignment_restriction: AlignmentRestriction = AlignmentRestriction.ANY
    spellcasting_ability: Ability | None = None
    spells_per_day: list[list[int | None]] = []  # [class level - 1][spell level]
    bonus_feat_levels: list[int] = []
    starting_wealth: StartingWealth

    @property
    def is_spellcaster(self) -> bool:
        return self.spellcasting_ability is not None


class SkillDefinition(BaseModel):
    """A skill."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    key_ability: Ability | None = None
    trained_only: bool = False
    armor_check: bool = False
    armor_check_multiplier: int = 1  # Swim takes double


class Synergy(BaseModel):
    """Five ranks in source grant a bonus to target."""
    model_config = ConfigDict(frozen=True)

    source: str
    target: str


class Prerequisites(BaseModel):
    """Structured feat prerequisites. Every category must pass."""
    model_config = ConfigDict(frozen=True)

    ability_mins: dict[Ability, int] = {}
    skill_mins: dict[str, int] = {}
    bab_min: int = 0
    required_feats: list[str] = []
    race_restriction: list[str] = []       # Any one of these races
    class_restriction: dict[str, int] = {}  # Any one class at the given level
    min_level: int = 0
    caster_level_min: int = 0


class FeatEffects(BaseModel):
    """Static numeric bonuses granted by a feat."""
    model_config = ConfigDict(frozen=True)

    skills: dict[str, int] = {}
    saves: dict[Save, int] = {}
    hit_points: int = 0
    initiative: int = 0
    armor_class: int = 0


class FeatDefinition(BaseModel):
    """A feat."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    type: str = "general"           # general, fighter, metamagic, item_creation, racial, epic
    fighter_bonus: bool = False     # Selectable as a fighter bonus feat
    prerequisites: Prerequisites = Prerequisites()
    effects: FeatEffects = FeatEffects()


class Item(BaseModel):
    """A catalog item."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    category: ItemCategory
    slot: Slot = Slot.NONE
    cost: float = 0                 # In gold pieces
    weight: float = 0               # In pounds
    damage: str | None = None       # Medium-size damage dice
    critical: str | None = None     # e.g., "19-20/x2"
    weapon_category: str | None = None
    armor_type: str | None = None   # light, medium, heavy
    armor_bonus: int = 0
    shield_bonus: int = 0
    max_dex_bonus: int | None = None
    armor_check_penalty: int = 0    # Zero or negative
    arcane_spell_failure: int = 0   # Percent


class Spell(BaseModel):
    """A spell and its level on each class list."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    school: str
    level: dict[str, int]           # class key -> spell level


class Monster(BaseModel):
    """A monster available to the encounter builder."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    challenge_rating: float         # Fractions allowed, e.g. 0.25
    type: str
    environments: list[str] = []


class RuleBook(BaseModel):
    """All reference tables, loaded once and passed to every calculator."""
    model_config = ConfigDict(frozen=True)

    races: dict[str, RaceDefinition] = {}
    classes: dict[str, ClassDefinition] = {}
    skills: dict[str, SkillDefinition] = {}
    synergies: list[Synergy] = []
    feats: dict[str, FeatDefinition] = {}
    items: dict[str, Item] = {}
    spells: dict[str, Spell] = {}
    monsters: dict[str, Monster] = {}
    experience_by_level: list[int] = []     # XP needed to reach level n+1
    cr_experience: dict[float, int] = {}    # Challenge rating -> XP award
    treasure_per_encounter: list[int] = []  # gp, by party level

    def race(self, key: str) -> RaceDefinition:
        return _lookup(self.races, "race", key)

    def character_class(self, key: str) -> ClassDefinition:
        return _lookup(self.classes, "class", key)

    def skill(self, key: str) -> SkillDefinition:
        return _lookup(self.skills, "skill", key)

    def feat(self, key: str) -> FeatDefinition:
        return _lookup(self.feats, "feat", key)

    def item(self, key: str) -> Item:
        return _lookup(self.items, "item", key)

    def spell(self, key: str) -> Spell:
        return _lookup(self.spells, "spell", key)

    def monster(self, key: str) -> Monster:
        return _lookup(self.monsters, "monster", key)


def _lookup(table: dict, kind: str, key: str):
    """Fetch a table entry or fail with UnknownReferenceError."""
    try:
        return table[key]
    except KeyError:
        raise UnknownReferenceError(kind, key) from None
