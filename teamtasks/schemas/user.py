from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be empty")
    return v


class SignupIn(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _not_blank(v).strip()

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        return _not_blank(v)


class LoginIn(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        return _not_blank(v)


class SignupOut(BaseModel):
    message: str
    name: str
    email: EmailStr


class LoginOut(BaseModel):
    message: str
    token: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
