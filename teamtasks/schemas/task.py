from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from teamtasks.models.task import TaskStatus
from teamtasks.schemas.project import ProjectOut
from teamtasks.schemas.team import TeamRef
from teamtasks.schemas.user import UserOut

# a hundred years
MAX_TASK_DAYS = 36500


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    project: int
    team: int
    owners: List[int] = Field(min_length=1)
    time_to_complete: int = Field(alias="timeToComplete", ge=1, le=MAX_TASK_DAYS)
    status: TaskStatus = TaskStatus.TODO
    tags: List[int] = []

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v):
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


class TaskComplete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(alias="taskId")


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    project: ProjectOut
    team: TeamRef
    owners: List[UserOut]
    time_to_complete: int = Field(serialization_alias="timeToComplete")
    status: str
    # tags are exposed by identifier only
    tags: List[int] = Field(validation_alias="tag_ids")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class ProjectTasksOut(BaseModel):
    project: ProjectOut
    tasks: List[TaskOut]
