# workforce/db/gateway.py
# Typed query interface over the ORM session. Domain services go through this and nothing else.
import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from workforce.core.errors import Conflict, NotFound

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def _load_options(model, includes: Iterable[str]):
    """ Turns dotted relationship paths ("assignments.employee") into eager-load options. """
    options = []
    for path in includes:
        owner = model
        option = None
        for name in path.split("."):
            attr = getattr(owner, name)
            option = joinedload(attr) if option is None else option.joinedload(attr)
            owner = attr.property.mapper.class_
        options.append(option)
    return options


def _integrity_conflict(exc: IntegrityError) -> Exception:
    message = str(exc.orig).lower()
    if "foreign key" in message:
        return NotFound("Referenced record does not exist")
    return Conflict("Record violates a uniqueness constraint", {"reason": str(exc.orig)})


class Gateway:
    def __init__(self, db: Session):
        self._db = db

    # --- Reads ---

    def find(
        self,
        model: Type[ModelT],
        *criteria,
        includes: Sequence[str] = (),
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
        **filters,
    ) -> List[ModelT]:
        query = self._db.query(model).options(*_load_options(model, includes))
        if filters:
            query = query.filter_by(**filters)
        if criteria:
            query = query.filter(*criteria)
        if order_by:
            query = query.order_by(*order_by)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def find_one(self, model: Type[ModelT], *criteria, includes: Sequence[str] = (), **filters) -> Optional[ModelT]:
        query = self._db.query(model).options(*_load_options(model, includes))
        if filters:
            query = query.filter_by(**filters)
        if criteria:
            query = query.filter(*criteria)
        return query.first()

    def get(self, model: Type[ModelT], id: int, includes: Sequence[str] = (), label: Optional[str] = None) -> ModelT:
        obj = self.find_one(model, includes=includes, id=id)
        if obj is None:
            raise NotFound(f"{label or model.__name__} not found", {"id": id})
        return obj

    def count(self, model, *criteria, **filters) -> int:
        query = self._db.query(model)
        if filters:
            query = query.filter_by(**filters)
        if criteria:
            query = query.filter(*criteria)
        return query.count()

    # --- Writes (flushed, committed by transaction()) ---

    def create(self, model: Type[ModelT], **data) -> ModelT:
        obj = model(**data)
        self._db.add(obj)
        self._flush()
        return obj

    def update(self, obj: ModelT, data: dict) -> ModelT:
        for field, value in data.items():
            setattr(obj, field, value)
        self._flush()
        return obj

    def delete(self, obj) -> None:
        self._db.delete(obj)
        self._flush()

    def _flush(self) -> None:
        try:
            self._db.flush()
        except IntegrityError as exc:
            raise _integrity_conflict(exc) from exc

    @contextmanager
    def transaction(self) -> Iterator["Gateway"]:
        """ Commits everything written inside the block at once, or nothing. """
        try:
            yield self
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise _integrity_conflict(exc) from exc
        except Exception:
            self._db.rollback()
            raise
