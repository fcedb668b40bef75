from pydantic import BaseModel


class TeamClosedTasks(BaseModel):
    name: str
    completedTasks: int


class ProjectPendingDays(BaseModel):
    project: str
    remainingDaysToClose: int
