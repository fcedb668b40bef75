from typing import List, Optional, Union

import structlog
from fastapi import APIRouter, Depends, Query

from teamtasks.dependencies import AuthGate, get_store
from teamtasks.errors import NotFoundError
from teamtasks.models.tag import Tag
from teamtasks.models.task import Task, TaskStatus
from teamtasks.models.user import User
from teamtasks.schemas.task import ProjectTasksOut, TaskComplete, TaskCreate, TaskOut
from teamtasks.store import TASK_EXPANSION, EntityStore

router = APIRouter(tags=["tasks"])
logger = structlog.get_logger(__name__)


@router.post("/tasks", response_model=TaskOut, status_code=201, dependencies=[Depends(AuthGate("tasks.create"))])
def create_task(task: TaskCreate, store: EntityStore = Depends(get_store)):
    saved = store.tasks.insert({
        "name": task.name,
        "project_id": task.project,
        "team_id": task.team,
        "owners": task.owners,
        "time_to_complete": task.time_to_complete,
        "status": task.status.value,
        "tags": task.tags,
    })
    logger.info("tasks.created", task_id=saved.id, project_id=saved.project_id)
    return store.tasks.find_by_id(saved.id, expand=TASK_EXPANSION)


@router.get(
    "/tasks",
    response_model=Union[ProjectTasksOut, List[TaskOut]],
    dependencies=[Depends(AuthGate("tasks.list"))],
)
def list_tasks(
    project: Optional[int] = Query(None),
    tag: Optional[int] = Query(None),
    team: Optional[int] = Query(None),
    owner: Optional[int] = Query(None),
    status: Optional[TaskStatus] = Query(None),
    store: EntityStore = Depends(get_store),
):
    """Without ``project`` return a plain list of tasks.

    With ``project`` return ``{project, tasks}`` for that project, even when
    the other filters leave no tasks.
    """
    criteria = []
    filters = {}
    if tag is not None:
        criteria.append(Task.tags.any(Tag.id == tag))
    if owner is not None:
        criteria.append(Task.owners.any(User.id == owner))
    if team is not None:
        filters["team_id"] = team
    if status is not None:
        filters["status"] = status.value

    if project is None:
        return store.tasks.find(*criteria, expand=TASK_EXPANSION, **filters)

    project_row = store.projects.find_by_id(project)
    if not project_row:
        raise NotFoundError("Project not found")
    tasks = store.tasks.find(*criteria, expand=TASK_EXPANSION, project_id=project, **filters)
    return {"project": project_row, "tasks": tasks}


@router.get("/task/{task_id}", response_model=TaskOut, dependencies=[Depends(AuthGate("tasks.get"))])
def get_task(task_id: int, store: EntityStore = Depends(get_store)):
    task = store.tasks.find_by_id(task_id, expand=TASK_EXPANSION)
    if not task:
        raise NotFoundError("Task not found")
    return task


@router.post("/task", response_model=TaskOut, dependencies=[Depends(AuthGate("tasks.complete"))])
def complete_task(body: TaskComplete, store: EntityStore = Depends(get_store)):
    task = store.tasks.update_by_id(
        body.task_id, {"status": TaskStatus.COMPLETED.value}, expand=TASK_EXPANSION
    )
    if not task:
        raise NotFoundError("Task not found")
    logger.info("tasks.completed", task_id=task.id)
    return task
