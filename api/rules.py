"""Read-only endpoints over the loaded rulebook."""

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Request

from engine.errors import RulesError, UnknownReferenceError
from models.rules import RuleBook

router = APIRouter()


class RuleTable(str, Enum):
    """Reference tables exposed over HTTP."""
    RACES = "races"
    CLASSES = "classes"
    FEATS = "feats"
    SKILLS = "skills"
    ITEMS = "items"
    SPELLS = "spells"
    MONSTERS = "monsters"


# Table -> name of the RuleBook lookup method for one entry
_LOOKUPS = {
    RuleTable.RACES: "race",
    RuleTable.CLASSES: "character_class",
    RuleTable.FEATS: "feat",
    RuleTable.SKILLS: "skill",
    RuleTable.ITEMS: "item",
    RuleTable.SPELLS: "spell",
    RuleTable.MONSTERS: "monster",
}


def get_rules(request: Request) -> RuleBook:
    """Get the rulebook loaded at startup from app state."""
    return request.app.state.rules


def http_error(exc: RulesError) -> HTTPException:
    """Translate a rules error into an HTTP error: 404 for unknown keys, else 400."""
    if isinstance(exc, UnknownReferenceError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


@router.get("/{table}")
def list_table(table: RuleTable, rules: RuleBook = Depends(get_rules)) -> dict:
    """Every entry of a reference table, keyed by its key."""
    entries = getattr(rules, table.value)
    return {key: entry.model_dump(mode="json") for key, entry in entries.items()}


@router.get("/{table}/{key}")
def get_entry(table: RuleTable, key: str, rules: RuleBook = Depends(get_rules)) -> dict:
    """One entry of a reference table."""
    try:
        entry = getattr(rules, _LOOKUPS[table])(key)
    except RulesError as exc:
        raise http_error(exc) from exc
    return entry.model_dump(mode="json")
