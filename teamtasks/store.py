"""Entity store: data access over the users, teams, projects, tags and tasks tables.

Every collection is wrapped by a :class:`Repository` exposing the same small
interface (``find``, ``find_by_id``, ``find_one_by``, ``insert``,
``update_by_id``). Reference fields listed in ``expand`` are loaded eagerly so
handlers can serialize them after the query returns.

Uniqueness is enforced by the database; an ``IntegrityError`` raised while
committing is turned into :class:`~teamtasks.errors.ConflictError`.
"""

from typing import Any, Iterable, List, Mapping, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from teamtasks.errors import ConflictError, ValidationError
from teamtasks.models.project import Project
from teamtasks.models.tag import Tag
from teamtasks.models.task import Task
from teamtasks.models.team import Team
from teamtasks.models.user import User

logger = structlog.get_logger(__name__)


class Repository:
    model: Any = None
    conflict_message = "Record conflicts with an existing one"

    def __init__(self, session: Session):
        self.session = session

    def _query(self, expand: Iterable[str] = ()):
        query = self.session.query(self.model)
        for name in expand:
            query = query.options(selectinload(getattr(self.model, name)))
        return query

    def find(self, *criteria, expand: Iterable[str] = (), **filters) -> List[Any]:
        """Return every record matching ``criteria`` and ``filters``, oldest first."""
        query = self._query(expand).filter(*criteria).filter_by(**filters)
        return query.order_by(self.model.id).all()

    def find_by_id(self, record_id: int, expand: Iterable[str] = ()) -> Optional[Any]:
        return self._query(expand).filter(self.model.id == record_id).first()

    def find_one_by(self, *criteria, expand: Iterable[str] = (), **filters) -> Optional[Any]:
        query = self._query(expand).filter(*criteria).filter_by(**filters)
        return query.order_by(self.model.id).first()

    def insert(self, record: Mapping[str, Any]) -> Any:
        obj = self.model(**record)
        self.session.add(obj)
        self._commit(self.conflict_message.format_map(_Blank(record)))
        self.session.refresh(obj)
        return obj

    def update_by_id(
        self, record_id: int, patch: Mapping[str, Any], expand: Iterable[str] = ()
    ) -> Optional[Any]:
        obj = self.find_by_id(record_id)
        if obj is None:
            return None
        for key, value in patch.items():
            setattr(obj, key, value)
        self._commit(Repository.conflict_message)
        return self.find_by_id(record_id, expand=expand)

    def _commit(self, conflict_message: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.info("store.conflict", table=self.model.__tablename__)
            raise ConflictError(conflict_message) from exc


class _Blank(dict):
    def __missing__(self, key):
        return ""


class UserRepository(Repository):
    model = User
    conflict_message = "This email is already registered"


class TeamRepository(Repository):
    model = Team
    conflict_message = "Team name ({name}) already exists"


class ProjectRepository(Repository):
    model = Project


class TagRepository(Repository):
    model = Tag
    conflict_message = "This tag already exists"


# relations a serialized task needs
TASK_EXPANSION = ("project", "team", "owners", "tags")


class TaskRepository(Repository):
    model = Task

    def insert(self, record: Mapping[str, Any]) -> Task:
        """Insert a task after checking that every reference exists.

        ``record["owners"]`` and ``record["tags"]`` hold identifiers; they are
        resolved to rows here.
        """
        record = dict(record)
        if self.session.get(Project, record.get("project_id")) is None:
            raise ValidationError(f"Project {record.get('project_id')} does not exist")
        if self.session.get(Team, record.get("team_id")) is None:
            raise ValidationError(f"Team {record.get('team_id')} does not exist")
        record["owners"] = self._resolve(User, record.get("owners") or [], "Owner")
        record["tags"] = self._resolve(Tag, record.get("tags") or [], "Tag")
        return super().insert(record)

    def _resolve(self, model, ids, label):
        wanted = set(ids)
        rows = self.session.query(model).filter(model.id.in_(wanted)).order_by(model.id).all()
        missing = wanted - {row.id for row in rows}
        if missing:
            raise ValidationError(f"{label} {sorted(missing)[0]} does not exist")
        return rows


class EntityStore:
    """One repository per collection, all sharing the request's session."""

    def __init__(self, session: Session):
        self.session = session
        self.users = UserRepository(session)
        self.teams = TeamRepository(session)
        self.projects = ProjectRepository(session)
        self.tags = TagRepository(session)
        self.tasks = TaskRepository(session)
