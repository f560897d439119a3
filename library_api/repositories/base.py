"""Shared repository contract.

A repository owns the persistence of one entity type and exposes the same
create / update / delete / get_by_id / list operations for each of them.
Writes are single conditional statements whose affected-row count is the
proof that the write landed.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_, select
from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from utils.errors import (
    ConflictError,
    DeletionFailed,
    InternalError,
    LibraryError,
    NotFound,
    UniqueConstraintViolation,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class PagedResult:
    """One page of a list query.

    Attributes:
        items: Entities on this page.
        offset: Number of matching rows skipped.
        limit: Maximum page size requested.
        total: Number of rows matching the filter, across all pages.
    """

    items: List[Any] = field(default_factory=list)
    offset: int = 0
    limit: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [item.to_dict() for item in self.items],
            'pagination': {
                'offset': self.offset,
                'limit': self.limit,
                'total': self.total,
            },
        }


def validate_payload(schema: Type[BaseModel], data: Any) -> BaseModel:
    """Validate a request payload against a schema.

    Args:
        schema: Pydantic model to validate with.
        data: Decoded JSON body.

    Returns:
        The validated schema instance.

    Raises:
        ValidationError: With the first human-readable problem found.
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return schema.model_validate(data)
    except SchemaError as e:
        raise ValidationError(_describe(e)) from e


def _describe(error: SchemaError) -> str:
    first = error.errors()[0]
    message = first['msg'].removeprefix('Value error, ')
    location = '.'.join(str(part) for part in first['loc'])
    return f'{location}: {message}' if location else message


class Repository:
    """Base class for entity repositories.

    Subclasses set ``model``, the create/update schemas and the columns
    searched by ``list``; they may override the ``_prepare_*`` hooks to
    derive stored values or enforce entity invariants.
    """

    model: Type[db.Model]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    search_columns: Sequence[str] = ()
    entity_name: str = 'Record'
    unique_message: str = 'A record with the same unique value already exists'

    @property
    def session(self):
        return db.session

    # ==================== Hooks ====================

    def _prepare_create(self, payload: BaseModel) -> Dict[str, Any]:
        return payload.model_dump()

    def _prepare_update(self, current: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def _before_delete(self, entity: Any) -> None:
        pass

    def _filters(self, **filters: Any) -> List[Any]:
        return []

    # ==================== Helpers ====================

    def _not_found(self) -> NotFound:
        return NotFound(f'{self.entity_name} not found')

    def _column(self, name: str):
        return getattr(self.model, name)

    @contextmanager
    def _writing(self) -> Iterator[None]:
        """Run a unit of work, commit it, and translate persistence errors."""
        try:
            yield
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning('%s write rejected by constraint: %s', self.entity_name, e.orig)
            detail = str(e.orig).lower()
            if 'unique' in detail or 'duplicate' in detail:
                raise UniqueConstraintViolation(self.unique_message) from e
            raise ConflictError(f'{self.entity_name} violates a data constraint') from e
        except LibraryError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception('%s write failed', self.entity_name)
            raise InternalError(f'Could not write {self.entity_name.lower()}') from e

    def _search_criterion(self, search: Optional[str]):
        if not search or not self.search_columns:
            return None
        term = search.strip()
        if not term:
            return None
        return or_(*(self._column(name).icontains(term, autoescape=True)
                     for name in self.search_columns))

    # ==================== Contract ====================

    def create(self, data: Dict[str, Any]) -> Any:
        """Validate and persist a new entity.

        Args:
            data: Decoded JSON payload.

        Returns:
            The persisted entity, including its generated id.

        Raises:
            ValidationError: If the payload is malformed.
            UniqueConstraintViolation: If a unique column collides.
        """
        payload = validate_payload(self.create_schema, data)
        entity = self.model(**self._prepare_create(payload))
        with self._writing():
            self.session.add(entity)
        logger.info('%s %s created', self.entity_name, entity.id)
        return entity

    def update(self, entity_id: int, data: Dict[str, Any]) -> Any:
        """Merge validated fields into an existing entity.

        The row is locked for the duration of the write and the update is a
        single statement whose affected-row count confirms it landed.

        Args:
            entity_id: Identifier of the entity to update.
            data: Decoded JSON payload with the fields to change.

        Returns:
            The entity as stored after the update.

        Raises:
            NotFound: If no entity has this id; nothing is written.
            ValidationError: If the payload is malformed or empty.
        """
        values = validate_payload(self.update_schema, data).model_dump(exclude_unset=True)
        if not values:
            raise ValidationError('No fields to update')

        with self._writing():
            current = self.session.scalars(
                select(self.model).where(self.model.id == entity_id).with_for_update()
            ).first()
            if current is None:
                raise self._not_found()
            values = self._prepare_update(current, values)
            result = self.session.execute(
                sa_update(self.model)
                .where(self.model.id == entity_id)
                .values({self._column(name): value for name, value in values.items()})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise self._not_found()

        logger.info('%s %s updated (%s)', self.entity_name, entity_id, ', '.join(sorted(values)))
        return self.get_by_id(entity_id)

    def delete(self, entity_id: int) -> Any:
        """Delete an entity and return a detached snapshot of it.

        Args:
            entity_id: Identifier of the entity to delete.

        Returns:
            The entity as it was before deletion.

        Raises:
            NotFound: If no entity has this id.
            DeletionFailed: If the delete statement removed no row.
        """
        entity = self.get_by_id(entity_id)
        self.session.refresh(entity)

        with self._writing():
            self._before_delete(entity)
            self.session.expunge(entity)
            result = self.session.execute(
                sa_delete(self.model)
                .where(self.model.id == entity_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise DeletionFailed(f'{self.entity_name} deletion failed')

        logger.info('%s %s deleted', self.entity_name, entity_id)
        return entity

    def get_by_id(self, entity_id: int) -> Any:
        """Retrieve an entity by id.

        Raises:
            NotFound: If no entity has this id.
        """
        entity = self.session.get(self.model, entity_id)
        if entity is None:
            raise self._not_found()
        return entity

    def list(self, limit: int, offset: int = 0, search: Optional[str] = None,
             **filters: Any) -> PagedResult:
        """List one page of entities matching an optional search text.

        The search is a case-insensitive substring match OR-ed across the
        repository's search columns. No match yields an empty page.

        Args:
            limit: Maximum number of items to return, at least 1.
            offset: Number of matching items to skip, at least 0.
            search: Text to look for.
            **filters: Entity-specific exact filters.

        Returns:
            The page and its pagination metadata.

        Raises:
            ValidationError: If limit or offset is out of range.
        """
        if limit <= 0 or offset < 0:
            raise ValidationError('Invalid limit or offset')

        criteria = self._filters(**filters)
        criterion = self._search_criterion(search)
        if criterion is not None:
            criteria.append(criterion)

        items = self.session.scalars(
            select(self.model).where(*criteria).order_by(self.model.id).offset(offset).limit(limit)
        ).all()
        total = self.session.scalar(
            select(func.count()).select_from(self.model).where(*criteria)
        )
        return PagedResult(items=list(items), offset=offset, limit=limit, total=total or 0)
