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
from app.schemas.meeting import MeetingCreate, MeetingOut, MeetingUpdate
from app.services.hateoas_service import HateoasService, RequestUrlResolver
from app.services.pagination import PageParams
from app.services.meeting_service import MeetingService
from app.routes.dependencies import get_page_params

logger = logging.getLogger("tracker.meeting_controller")

router = APIRouter(prefix="/meetings", dependencies=[Depends(get_current_user)])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Meeting not found"}}


def get_meeting_service(db: Session = Depends(get_db), tracer: Tracer = Depends(get_tracer)) -> MeetingService:
    return MeetingService(db, tracer)


@router.get("", name="GetMeetings", response_model=PagedResult[MeetingOut])
def list_meetings(
    request: Request,
    params: PageParams = Depends(get_page_params),
    service: MeetingService = Depends(get_meeting_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    """Get all meetings with pagination"""
    result = service.list(params)
    result.links = hateoas.generate_pagination_links(result, "Meeting", RequestUrlResolver(request))
    return result


@router.get("/{id}", name="GetMeeting", response_model=MeetingOut, responses=NOT_FOUND)
def get_meeting(
    id: uuid.UUID,
    request: Request,
    service: MeetingService = Depends(get_meeting_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    meeting = service.get(id)
    if meeting is None:
        raise EntityNotFound("Meeting", id)
    out = MeetingOut.model_validate(meeting)
    out.links = hateoas.generate_resource_links("Meeting", id, RequestUrlResolver(request))
    return out


@router.post("", name="CreateMeeting", response_model=MeetingOut, status_code=status.HTTP_201_CREATED)
def create_meeting(
    data: MeetingCreate,
    request: Request,
    response: Response,
    service: MeetingService = Depends(get_meeting_service),
):
    meeting = service.create(data)
    response.headers["Location"] = str(request.url_for("GetMeeting", id=str(meeting.id)))
    return meeting


@router.put("/cancel/{id}", name="EndMeeting", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def end_meeting(id: uuid.UUID, service: MeetingService = Depends(get_meeting_service)):
    """Close a meeting and record how long it lasted"""
    if service.end(id) is None:
        raise EntityNotFound("Meeting", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{id}", name="UpdateMeeting", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def update_meeting(id: uuid.UUID, data: MeetingUpdate, service: MeetingService = Depends(get_meeting_service)):
    if id != data.id:
        logger.warning("Path id does not match body id", extra={"path_id": str(id), "body_id": str(data.id)})
        return Response(status_code=status.HTTP_400_BAD_REQUEST)
    service.update(id, data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{id}", name="DeleteMeeting", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def delete_meeting(id: uuid.UUID, service: MeetingService = Depends(get_meeting_service)):
    if not service.delete(id):
        raise EntityNotFound("Meeting", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
