from typing import List

import structlog
from fastapi import APIRouter, Depends

from teamtasks.dependencies import AuthGate, get_store
from teamtasks.schemas.project import ProjectCreate, ProjectOut
from teamtasks.store import EntityStore

router = APIRouter(tags=["projects"])
logger = structlog.get_logger(__name__)


@router.get("/projects", response_model=List[ProjectOut], dependencies=[Depends(AuthGate("projects.list"))])
def list_projects(store: EntityStore = Depends(get_store)):
    return store.projects.find()


@router.post(
    "/projects",
    response_model=ProjectOut,
    status_code=201,
    dependencies=[Depends(AuthGate("projects.create"))],
)
def create_project(project: ProjectCreate, store: EntityStore = Depends(get_store)):
    saved = store.projects.insert({"name": project.name, "description": project.description or ""})
    logger.info("projects.created", project_id=saved.id)
    return saved
