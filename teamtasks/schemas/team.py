from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional


class TeamCreate(BaseModel):
    name: str
    description: Optional[str] = ""

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v):
        if not v.strip():
            raise ValueError("Team name is required")
        return v.strip()


class TeamRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class TeamOut(TeamRef):
    description: Optional[str] = ""
