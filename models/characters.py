"""Character build models for the rules engine."""

from pydantic import BaseModel

from models.rules import Ability, Alignment


class AbilityScores(BaseModel):
    """The six core ability scores."""
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10

    def score(self, ability: Ability) -> int:
        return getattr(self, Ability(ability).value)

    def modifier(self, ability: Ability) -> int:
        """Modifier for one ability: (score - 10) // 2."""
        return (self.score(ability) - 10) // 2


class ClassLevel(BaseModel):
    """Levels taken in one class."""
    class_key: str                  # e.g., "fighter"
    level: int = 1


class InventoryEntry(BaseModel):
    """A carried item, by catalog key."""
    item_key: str
    quantity: int = 1
    equipped: bool = False


class CharacterBuild(BaseModel):
    """Everything a player has chosen. Derived numbers are never stored here."""
    name: str = "Unnamed"
    race: str = "human"
    alignment: Alignment = Alignment.TRUE_NEUTRAL
    classes: list[ClassLevel] = []  # In the order they were taken
    ability_scores: AbilityScores = AbilityScores()  # Base scores, before racial adjustments
    ability_increases: list[Ability] = []  # One per fourth character level
    skill_ranks: dict[str, int] = {}
    feats: list[str] = []
    inventory: list[InventoryEntry] = []
    prepared_spells: dict[str, list[str]] = {}  # class key -> spell keys
    hit_point_rolls: list[int] = []  # Levels after the first, for the "rolled" policy
    misc_ac: int = 0
    misc_saves: int = 0
