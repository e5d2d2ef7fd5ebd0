import logging
import uuid
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from opentelemetry.trace import Tracer
from sqlalchemy.orm import Session
from app.core.security import get_current_user
from app.core.tracing import get_tracer
from app.database import get_db
from app.schemas.pagination import ItemEnvelope
from app.schemas.report import Report
from app.services.hateoas_service import HateoasService, RequestUrlResolver
from app.services.pagination import PageParams
from app.services.report_service import ReportService
from app.routes.dependencies import get_page_params

logger = logging.getLogger("tracker.report_controller")

router = APIRouter(prefix="/report", dependencies=[Depends(get_current_user)])

# A missing userId matches no rows and yields a zero-filled report
NIL_USER_ID = uuid.UUID(int=0)


@router.get("", name="GetReports", response_model=ItemEnvelope[Report])
def get_report(
    request: Request,
    userId: uuid.UUID = Query(NIL_USER_ID),
    startDate: date = Query(...),
    endDate: date = Query(...),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    tracer: Tracer = Depends(get_tracer),
    hateoas: HateoasService = Depends(HateoasService),
):
    """
    Productivity report for one user between two dates (inclusive):
    completed and in-progress tasks, finished meetings, focus minutes and
    task completion percentage.
    """
    if endDate < startDate:
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")

    logger.info(
        "Generating report",
        extra={"user_id": str(userId), "start_date": startDate.isoformat(), "end_date": endDate.isoformat()},
    )
    service = ReportService(db, tracer)
    report = service.build_report(userId, startDate, endDate)

    result = ItemEnvelope[Report](
        item=report,
        current_page=params.page_number,
        page_size=params.page_size,
        total_items=service.total_task_count(),
    )
    result.links = hateoas.generate_pagination_links(result, "Report", RequestUrlResolver(request))
    return result
