from typing import List

from fastapi import APIRouter, Depends

from teamtasks.dependencies import AuthGate, get_store
from teamtasks.schemas.user import UserOut
from teamtasks.store import EntityStore

router = APIRouter(tags=["users"])


@router.get("/users", response_model=List[UserOut], dependencies=[Depends(AuthGate("users.list"))])
def list_users(store: EntityStore = Depends(get_store)):
    # UserOut never carries the password hash
    return store.users.find()
