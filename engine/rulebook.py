"""Load the SRD reference tables from JSON into a RuleBook."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from models.rules import (
    ClassDefinition,
    FeatDefinition,
    Item,
    Monster,
    RaceDefinition,
    RuleBook,
    SkillDefinition,
    Spell,
    Synergy,
)

logger = logging.getLogger(__name__)


def _read_json(rules_dir: Path, name: str) -> dict:
    with open(rules_dir / f"{name}.json") as f:
        return json.load(f)


def _keyed(model: type, entries: dict) -> dict:
    """Validate every entry of a key -> record table, stamping the key on each."""
    return {key: model.model_validate({"key": key, **entry}) for key, entry in entries.items()}


def load_rulebook(rules_dir: str | Path) -> RuleBook:
    """Read every reference table from a directory of JSON files.

    Args:
        rules_dir: Directory containing races.json, classes.json, skills.json,
            feats.json, items.json, spells.json, monsters.json and tables.json.

    Returns:
        A fully validated RuleBook.

    Raises:
        FileNotFoundError: If a table file is missing.
        pydantic.ValidationError: If a table entry has the wrong shape.
    """
    rules_dir = Path(rules_dir)

    skills = _read_json(rules_dir, "skills")
    tables = _read_json(rules_dir, "tables")

    rules = RuleBook(
        races=_keyed(RaceDefinition, _read_json(rules_dir, "races")),
        classes=_keyed(ClassDefinition, _read_json(rules_dir, "classes")),
        skills=_keyed(SkillDefinition, skills["skills"]),
        synergies=[Synergy.model_validate(s) for s in skills.get("synergies", [])],
        feats=_keyed(FeatDefinition, _read_json(rules_dir, "feats")),
        items=_keyed(Item, _read_json(rules_dir, "items")),
        spells=_keyed(Spell, _read_json(rules_dir, "spells")),
        monsters=_keyed(Monster, _read_json(rules_dir, "monsters")),
        experience_by_level=tables["experience_by_level"],
        cr_experience=tables["cr_experience"],
        treasure_per_encounter=tables["treasure_per_encounter"],
    )

    logger.info(
        "Loaded rulebook from %s: %d races, %d classes, %d feats, %d skills, "
        "%d items, %d spells, %d monsters",
        rules_dir,
        len(rules.races),
        len(rules.classes),
        len(rules.feats),
        len(rules.skills),
        len(rules.items),
        len(rules.spells),
        len(rules.monsters),
    )
    return rules
