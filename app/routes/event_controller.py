import logging
import uuid
from fastapi import APIRouter, Depends, Request, Response, status
from opentelemetry.trace import Tracer
from sqlalchemy.orm import Session
from app.core.exceptions import EntityNotFound
from app.core.security import get_current_user
from app.core.tracing import get_tracer
from app.database import get_db
from app.schemas.pagination import ErrorResponse, PagedResult
from app.schemas.event import EventCreate, EventOut, EventUpdate
from app.services.hateoas_service import HateoasService, RequestUrlResolver
from app.services.pagination import PageParams
from app.services.event_service import EventService
from app.routes.dependencies import get_page_params

logger = logging.getLogger("tracker.event_controller")

router = APIRouter(prefix="/events", dependencies=[Depends(get_current_user)])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Event not found"}}


def get_event_service(db: Session = Depends(get_db), tracer: Tracer = Depends(get_tracer)) -> EventService:
    return EventService(db, tracer)


@router.get("", name="GetEvents", response_model=PagedResult[EventOut])
def list_events(
    request: Request,
    params: PageParams = Depends(get_page_params),
    service: EventService = Depends(get_event_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    """Get all focus-session events with pagination"""
    result = service.list(params)
    result.links = hateoas.generate_pagination_links(result, "Event", RequestUrlResolver(request))
    return result


@router.get("/{id}", name="GetEvent", response_model=EventOut, responses=NOT_FOUND)
def get_event(
    id: uuid.UUID,
    request: Request,
    service: EventService = Depends(get_event_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    event = service.get(id)
    if event is None:
        raise EntityNotFound("Event", id)
    out = EventOut.model_validate(event)
    out.links = hateoas.generate_resource_links("Event", id, RequestUrlResolver(request))
    return out


@router.post("", name="CreateEvent", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    data: EventCreate,
    request: Request,
    response: Response,
    service: EventService = Depends(get_event_service),
):
    event = service.create(data)
    response.headers["Location"] = str(request.url_for("GetEvent", id=str(event.id)))
    return event


@router.put("/cancel/{id}", name="EndEvent", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def end_event(id: uuid.UUID, service: EventService = Depends(get_event_service)):
    """End a focus session and record its duration"""
    if service.end(id) is None:
        raise EntityNotFound("Event", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{id}", name="UpdateEvent", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def update_event(id: uuid.UUID, data: EventUpdate, service: EventService = Depends(get_event_service)):
    if id != data.id:
        logger.warning("Path id does not match body id", extra={"path_id": str(id), "body_id": str(data.id)})
        return Response(status_code=status.HTTP_400_BAD_REQUEST)
    service.update(id, data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{id}", name="DeleteEvent", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def delete_event(id: uuid.UUID, service: EventService = Depends(get_event_service)):
    if not service.delete(id):
        raise EntityNotFound("Event", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
