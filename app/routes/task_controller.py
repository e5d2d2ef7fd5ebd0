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
from app.schemas.task import TaskCreate, TaskOut, TaskUpdate
from app.services.hateoas_service import HateoasService, RequestUrlResolver
from app.services.pagination import PageParams
from app.services.task_service import TaskService
from app.routes.dependencies import get_page_params

logger = logging.getLogger("tracker.task_controller")

router = APIRouter(prefix="/tasks", dependencies=[Depends(get_current_user)])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Task not found"}}


def get_task_service(db: Session = Depends(get_db), tracer: Tracer = Depends(get_tracer)) -> TaskService:
    return TaskService(db, tracer)


@router.get("", name="GetTasks", response_model=PagedResult[TaskOut])
def list_tasks(
    request: Request,
    params: PageParams = Depends(get_page_params),
    service: TaskService = Depends(get_task_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    """Get all tasks with pagination"""
    result = service.list(params)
    result.links = hateoas.generate_pagination_links(result, "Task", RequestUrlResolver(request))
    return result


@router.get("/{id}", name="GetTask", response_model=TaskOut, responses=NOT_FOUND)
def get_task(
    id: uuid.UUID,
    request: Request,
    service: TaskService = Depends(get_task_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    task = service.get(id)
    if task is None:
        raise EntityNotFound("Task", id)
    out = TaskOut.model_validate(task)
    out.links = hateoas.generate_resource_links("Task", id, RequestUrlResolver(request))
    return out


@router.post("", name="CreateTask", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreate,
    request: Request,
    response: Response,
    service: TaskService = Depends(get_task_service),
):
    task = service.create(data)
    response.headers["Location"] = str(request.url_for("GetTask", id=str(task.id)))
    return task


@router.put("/cancel/{id}", name="EndTask", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def end_task(id: uuid.UUID, service: TaskService = Depends(get_task_service)):
    """Mark a task COMPLETED and record the minutes spent on it"""
    if service.end(id) is None:
        raise EntityNotFound("Task", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{id}", name="UpdateTask", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def update_task(id: uuid.UUID, data: TaskUpdate, service: TaskService = Depends(get_task_service)):
    if id != data.id:
        logger.warning("Path id does not match body id", extra={"path_id": str(id), "body_id": str(data.id)})
        return Response(status_code=status.HTTP_400_BAD_REQUEST)
    service.update(id, data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{id}", name="DeleteTask", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def delete_task(id: uuid.UUID, service: TaskService = Depends(get_task_service)):
    if not service.delete(id):
        raise EntityNotFound("Task", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
