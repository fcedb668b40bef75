from typing import List

import structlog
from fastapi import APIRouter, Depends

from teamtasks.dependencies import AuthGate, get_store
from teamtasks.errors import NotFoundError
from teamtasks.schemas.team import TeamCreate, TeamOut
from teamtasks.store import EntityStore

router = APIRouter(tags=["teams"])
logger = structlog.get_logger(__name__)


@router.get("/teams", response_model=List[TeamOut], dependencies=[Depends(AuthGate("teams.list"))])
def list_teams(store: EntityStore = Depends(get_store)):
    return store.teams.find()


@router.post(
    "/teams",
    response_model=TeamOut,
    status_code=201,
    dependencies=[Depends(AuthGate("teams.create"))],
)
def create_team(team: TeamCreate, store: EntityStore = Depends(get_store)):
    saved = store.teams.insert({"name": team.name, "description": team.description or ""})
    logger.info("teams.created", team_id=saved.id)
    return saved


@router.get("/team/{team_id}", response_model=TeamOut, dependencies=[Depends(AuthGate("teams.get"))])
def get_team(team_id: int, store: EntityStore = Depends(get_store)):
    team = store.teams.find_by_id(team_id)
    if not team:
        raise NotFoundError("Team not found")
    return team
