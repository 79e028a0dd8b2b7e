# backend/directory/repositories/base_repository.py
"""
Base repository for directory data access.

Repositories never commit: services own transaction boundaries through
BaseService.transaction(). Every SQLAlchemy failure is logged and re-raised
as RepositoryException, which the API renders as a generic 500.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Shared lookups and writes for one mapped model.

    Subclasses add domain queries and may override ``_apply_eager_loading``
    to attach the relationships their callers render.
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def _fail(self, action: str, error: SQLAlchemyError) -> RepositoryException:
        self.logger.error(f"{self.model.__name__} {action} failed: {error}")
        return RepositoryException(f"Failed to {action} {self.model.__name__}: {error}")

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        try:
            query = self._build_query().filter(self.model.id == id)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.first()
        except SQLAlchemyError as e:
            raise self._fail("load", e)

    def create(self, **kwargs: Any) -> T:
        """Build, add and flush a row; the caller commits."""
        return self.add(self.model(**kwargs))

    def add(self, entity: T) -> T:
        """Attach an already-built entity (children included) and flush for its id."""
        try:
            self.db.add(entity)
            self.db.flush()
            return entity
        except IntegrityError as e:
            self.db.rollback()
            raise self._fail("insert (constraint violated)", e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._fail("insert", e) from e

    def flush(self) -> None:
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._fail("save", e) from e

    def delete(self, id: str) -> bool:
        """Delete by primary key. False when no row matched."""
        entity = self.get_by_id(id, load_relationships=False)
        if entity is None:
            return False
        try:
            self.db.delete(entity)
            self.db.flush()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._fail("delete", e) from e

    def exists(self, **criteria: Any) -> bool:
        return self.find_one_by(**criteria) is not None

    def count(self, **criteria: Any) -> int:
        try:
            return self._build_query().filter_by(**criteria).count()
        except SQLAlchemyError as e:
            raise self._fail("count", e)

    def find_one_by(self, **criteria: Any) -> Optional[T]:
        try:
            return self._build_query().filter_by(**criteria).first()
        except SQLAlchemyError as e:
            raise self._fail("find", e)

    # Search candidates

    # API sort key -> column expression, for sorts that can run in SQL
    sort_columns: Dict[str, Any] = {}

    def _matching(self, predicates: Sequence[Any]) -> Query:
        query = self._build_query()
        if predicates:
            query = query.filter(*predicates)
        return query

    def find_candidates(self, predicates: Sequence[Any], cap: int) -> List[T]:
        """
        Fetch the candidate superset for an in-memory search pass.

        Ordered by id so that truncation at ``cap`` is deterministic.
        """
        query = self._apply_eager_loading(self._matching(predicates))
        return self._execute_query(query.order_by(self.model.id).limit(cap))

    def count_matching(self, predicates: Sequence[Any]) -> int:
        try:
            return self._matching(predicates).order_by(None).count()
        except SQLAlchemyError as e:
            raise self._fail("count", e)

    def find_sorted_page(
        self,
        predicates: Sequence[Any],
        sort_by: str,
        *,
        descending: bool,
        offset: int,
        limit: int,
    ) -> List[T]:
        """One page ordered by ``sort_columns[sort_by]``, ties by id ascending."""
        column = self.sort_columns[sort_by]
        query = self._apply_eager_loading(self._matching(predicates)).order_by(
            column.desc() if descending else column.asc(), self.model.id.asc()
        )
        return self._execute_query(query.offset(offset).limit(limit))

    # Helpers for subclasses

    def _apply_eager_loading(self, query: Query) -> Query:
        return query

    def _build_query(self) -> Query:
        return self.db.query(self.model)

    def _execute_query(self, query: Query) -> List[T]:
        try:
            return query.all()
        except SQLAlchemyError as e:
            raise self._fail("query", e)

    def _execute_scalar(self, query: Query) -> Any:
        try:
            return query.scalar()
        except SQLAlchemyError as e:
            raise self._fail("aggregate", e)
