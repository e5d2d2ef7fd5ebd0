import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Optional, Type
from opentelemetry.trace import Tracer
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from app.core.exceptions import ConflictError, EntityNotFound
from app.core.request_logger import get_request_id, get_user_id
from app.core.tracing import record_exception, set_span_attributes
from app.schemas.pagination import PagedResult
from app.services.pagination import PageParams, paginate

logger = logging.getLogger("tracker.entity_service")


def whole_minutes(start: datetime, end: Optional[datetime]) -> int:
    if end is None:
        return 0
    return int((end - start).total_seconds() // 60)


class EntityService:
    """
    CRUD over one ORM model.

    Subclasses set ``model``, ``out_schema`` and ``resource`` (the singular
    name used in route names, logs and span names).
    """

    model = None
    out_schema: Type[BaseModel] = None
    resource: str = ""

    def __init__(self, db: Session, tracer: Tracer):
        self.db = db
        self.tracer = tracer

    @contextmanager
    def _span(self, operation: str):
        with self.tracer.start_as_current_span(f"{self.__class__.__name__}.{operation}") as span:
            set_span_attributes(span, {"request.id": get_request_id(), "enduser.id": get_user_id()})
            yield span

    def list(self, params: PageParams) -> PagedResult:
        with self._span("list") as span:
            query = self.db.query(self.model).order_by(self.model.id)
            result = paginate(query, params, self.out_schema)
            set_span_attributes(span, {
                "pagination.page_number": params.page_number,
                "pagination.page_size": params.page_size,
                f"{self.resource.lower()}.count": len(result.items),
                f"{self.resource.lower()}.total_items": result.total_items,
            })
            logger.info(
                f"Listing {self.resource}",
                extra={"page": params.page_number, "size": params.page_size, "total": result.total_items},
            )
            return result

    def get(self, entity_id: uuid.UUID):
        with self._span("get") as span:
            entity = self.db.get(self.model, entity_id)
            set_span_attributes(span, {"entity.id": entity_id, "entity.found": entity is not None})
            return entity

    def exists(self, entity_id: uuid.UUID) -> bool:
        return self.db.query(self.model.id).filter(self.model.id == entity_id).first() is not None

    def create(self, data: BaseModel):
        with self._span("create") as span:
            entity = self.model(**self._create_values(data))
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
            set_span_attributes(span, {"entity.id": entity.id})
            logger.info(f"{self.resource} created", extra={"id": str(entity.id)})
            return entity

    def _create_values(self, data: BaseModel) -> dict:
        return data.model_dump(exclude_none=True)

    def _update_values(self, data: BaseModel) -> dict:
        return data.model_dump(exclude={"id"})

    def _commit(self, span, entity_id: uuid.UUID) -> None:
        """
        Commit a write to an existing row.

        A version mismatch rolls back, then raises EntityNotFound when the row
        is gone or ConflictError when another request changed it.
        """
        try:
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            record_exception(span, e)
            if not self.exists(entity_id):
                raise EntityNotFound(self.resource, entity_id) from e
            logger.warning(f"Concurrent write on {self.resource}", extra={"id": str(entity_id)})
            raise ConflictError(self.resource, entity_id) from e

    def update(self, entity_id: uuid.UUID, data: BaseModel):
        """
        Replace every writable column of the stored entity.

        Raises EntityNotFound when the id is unknown, or when the row
        vanished while the update was in flight. Raises ConflictError when
        the row was modified concurrently but still exists.
        """
        with self._span("update") as span:
            set_span_attributes(span, {"entity.id": entity_id})
            entity = self.db.get(self.model, entity_id)
            if entity is None:
                raise EntityNotFound(self.resource, entity_id)

            for key, value in self._update_values(data).items():
                setattr(entity, key, value)

            self._commit(span, entity_id)
            self.db.refresh(entity)
            logger.info(f"{self.resource} updated", extra={"id": str(entity_id)})
            return entity

    def delete(self, entity_id: uuid.UUID) -> bool:
        with self._span("delete") as span:
            entity = self.db.get(self.model, entity_id)
            set_span_attributes(span, {"entity.id": entity_id, "entity.found": entity is not None})
            if entity is None:
                return False
            self.db.delete(entity)
            self._commit(span, entity_id)
            logger.info(f"{self.resource} deleted", extra={"id": str(entity_id)})
            return True


class EndableEntityService(EntityService):
    """Entities with a single one-way "end" transition."""

    def _apply_end(self, entity, now: datetime) -> None:
        raise NotImplementedError

    def end(self, entity_id: uuid.UUID, now: Optional[datetime] = None):
        """
        Stamp the end time, recompute the duration, persist. None if absent;
        concurrent changes raise like ``update``.
        """
        with self._span("end") as span:
            entity = self.db.get(self.model, entity_id)
            set_span_attributes(span, {"entity.id": entity_id, "entity.found": entity is not None})
            if entity is None:
                return None
            self._apply_end(entity, now or datetime.utcnow())
            self._commit(span, entity_id)
            self.db.refresh(entity)
            logger.info(f"{self.resource} ended", extra={"id": str(entity_id)})
            return entity
