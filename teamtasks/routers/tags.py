from typing import List

from fastapi import APIRouter, Depends

from teamtasks.dependencies import AuthGate, get_store
from teamtasks.schemas.tag import TagCreate, TagOut
from teamtasks.store import EntityStore

router = APIRouter(tags=["tags"])


@router.get("/tags", response_model=List[TagOut], dependencies=[Depends(AuthGate("tags.list"))])
def list_tags(store: EntityStore = Depends(get_store)):
    return store.tags.find()


# open by default, see Settings.open_routes
@router.post("/tags", response_model=TagOut, status_code=201, dependencies=[Depends(AuthGate("tags.create"))])
def create_tag(tag: TagCreate, store: EntityStore = Depends(get_store)):
    return store.tags.insert({"name": tag.name})
