from typing import List

import structlog
from fastapi import APIRouter, Depends

from teamtasks.dependencies import AuthGate, get_store
from teamtasks.models.task import Task, TaskStatus
from teamtasks.schemas.report import ProjectPendingDays, TeamClosedTasks
from teamtasks.schemas.task import TaskOut
from teamtasks.services import reports
from teamtasks.store import TASK_EXPANSION, EntityStore

router = APIRouter(prefix="/report", tags=["reports"])
logger = structlog.get_logger(__name__)

COMPLETED = TaskStatus.COMPLETED.value


@router.get(
    "/closed-tasks",
    response_model=List[TeamClosedTasks],
    dependencies=[Depends(AuthGate("reports.closed-tasks"))],
)
def closed_tasks(store: EntityStore = Depends(get_store)):
    completed = store.tasks.find(status=COMPLETED)
    reports.require_rows(completed, "Reports of desired Tasks not found")

    teams = store.teams.find()
    result = reports.closed_tasks_by_team(completed, teams)
    logger.info("reports.closed_tasks", teams=len(teams), completed=len(completed))
    return result


# open by default, see Settings.open_routes
@router.get(
    "/pending",
    response_model=List[ProjectPendingDays],
    dependencies=[Depends(AuthGate("reports.pending"))],
)
def pending(store: EntityStore = Depends(get_store)):
    outstanding = store.tasks.find(Task.status != COMPLETED, expand=("project",))
    reports.require_rows(outstanding, "Pending Tasks not found")

    projects = store.projects.find()
    result = reports.pending_days_by_project(outstanding, projects)
    logger.info("reports.pending", projects=len(projects), pending=len(outstanding))
    return result


@router.get(
    "/last-week",
    response_model=List[TaskOut],
    dependencies=[Depends(AuthGate("reports.last-week"))],
)
def last_week(store: EntityStore = Depends(get_store)):
    cutoff = reports.last_week_cutoff()
    recent = store.tasks.find(Task.updated_at >= cutoff, status=COMPLETED, expand=TASK_EXPANSION)
    reports.require_rows(recent, "Reports of desired Tasks not found")
    return recent
