"""Character endpoints: derive stats, validate builds, feats and ability rolls.

Every request carries the full CharacterBuild; nothing is stored server-side.
"""

import random

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.rules import get_rules, http_error
from config import DEFAULT_HP_POLICY, DEFAULT_POINT_BUY_BUDGET
from engine.abilities import RollMethod, roll_ability_scores, validate_point_buy
from engine.combat import HpPolicy
from engine.equipment import roll_starting_wealth
from engine.errors import RulesError
from engine.feats import available_feats, check_prerequisites
from engine.rules import derive_stats, validate_build
from models.characters import AbilityScores, CharacterBuild
from models.results import DerivedStats, PointBuyResult, PrerequisiteCheck, ValidationResult
from models.rules import FeatDefinition, RuleBook

router = APIRouter()


class RollAbilitiesRequest(BaseModel):
    """Request body for rolling a set of ability scores."""
    method: RollMethod = RollMethod.FOUR_D6_DROP_LOWEST
    seed: int | None = None         # For reproducible rolls


class RollAbilitiesResponse(BaseModel):
    """Six generated scores, to be assigned by the player."""
    method: RollMethod
    scores: list[int]


class StartingWealthRequest(BaseModel):
    """Request body for rolling starting gold."""
    class_key: str
    seed: int | None = None


class StartingWealthResponse(BaseModel):
    """Rolled starting gold."""
    class_key: str
    gold: int


@router.post("/derive", response_model=DerivedStats)
def derive(
    build: CharacterBuild,
    hp_policy: HpPolicy = HpPolicy(DEFAULT_HP_POLICY),
    rules: RuleBook = Depends(get_rules),
) -> DerivedStats:
    """Compute every derived statistic of a build."""
    try:
        return derive_stats(build, rules, hp_policy)
    except RulesError as exc:
        raise http_error(exc) from exc


@router.post("/validate", response_model=ValidationResult)
def validate(
    build: CharacterBuild,
    budget: int | None = None,
    rules: RuleBook = Depends(get_rules),
) -> ValidationResult:
    """Validate a build. Pass a budget to also check base scores under point buy."""
    try:
        return validate_build(build, rules, budget)
    except RulesError as exc:
        raise http_error(exc) from exc


@router.post("/point-buy", response_model=PointBuyResult)
def point_buy(scores: AbilityScores, budget: int = DEFAULT_POINT_BUY_BUDGET) -> PointBuyResult:
    """Price six base scores against a point-buy budget."""
    return validate_point_buy(scores, budget)


@router.post("/feats/available", response_model=list[FeatDefinition])
def feats_available(build: CharacterBuild, rules: RuleBook = Depends(get_rules)) -> list[FeatDefinition]:
    """Feats the build qualifies for and has not taken."""
    try:
        return available_feats(build, rules)
    except RulesError as exc:
        raise http_error(exc) from exc


@router.post("/feats/{feat_key}/check", response_model=PrerequisiteCheck)
def feat_check(
    feat_key: str,
    build: CharacterBuild,
    rules: RuleBook = Depends(get_rules),
) -> PrerequisiteCheck:
    """Check one feat's prerequisites against a build."""
    try:
        return check_prerequisites(rules.feat(feat_key), build, rules)
    except RulesError as exc:
        raise http_error(exc) from exc


@router.post("/roll-abilities", response_model=RollAbilitiesResponse)
def roll_abilities(req: RollAbilitiesRequest) -> RollAbilitiesResponse:
    """Generate six ability scores."""
    rng = random.Random(req.seed)
    return RollAbilitiesResponse(method=req.method, scores=roll_ability_scores(req.method, rng=rng))


@router.post("/starting-wealth", response_model=StartingWealthResponse)
def starting_wealth(
    req: StartingWealthRequest,
    rules: RuleBook = Depends(get_rules),
) -> StartingWealthResponse:
    """Roll starting gold for a class."""
    try:
        class_def = rules.character_class(req.class_key)
    except RulesError as exc:
        raise http_error(exc) from exc
    gold = roll_starting_wealth(class_def, rng=random.Random(req.seed))
    return StartingWealthResponse(class_key=req.class_key, gold=gold)
