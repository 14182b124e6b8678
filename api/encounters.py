"""Random encounter generation endpoint."""

import random

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.rules import get_rules, http_error
from config import MAX_MONSTERS_PER_ENCOUNTER
from engine.encounters import Difficulty, generate_encounter
from engine.errors import RulesError
from models.results import Encounter
from models.rules import RuleBook

router = APIRouter()


class EncounterRequest(BaseModel):
    """Request body for generating an encounter."""
    party_levels: list[int]         # Character level of each party member
    difficulty: Difficulty = Difficulty.AVERAGE
    environment: str | None = None  # e.g., "underground"
    seed: int | None = None         # For reproducible encounters
    max_monsters: int = MAX_MONSTERS_PER_ENCOUNTER


@router.post("/generate", response_model=Encounter)
def generate(req: EncounterRequest, rules: RuleBook = Depends(get_rules)) -> Encounter:
    """Generate an encounter sized to the party."""
    if any(level < 1 for level in req.party_levels):
        raise HTTPException(status_code=400, detail="Party levels must be at least 1")
    if req.max_monsters < 1:
        raise HTTPException(status_code=400, detail="max_monsters must be at least 1")

    try:
        return generate_encounter(
            req.party_levels,
            req.difficulty,
            rules,
            environment=req.environment,
            rng=random.Random(req.seed),
            max_monsters=req.max_monsters,
        )
    except RulesError as exc:
        raise http_error(exc) from exc
