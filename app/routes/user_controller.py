import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from opentelemetry.trace import Tracer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.exceptions import EntityNotFound
from app.core.security import get_current_user
from app.core.tracing import get_tracer
from app.database import get_db
from app.schemas.pagination import ErrorResponse, PagedResult
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services.hateoas_service import HateoasService, RequestUrlResolver
from app.services.pagination import PageParams
from app.services.user_service import UserService
from app.routes.dependencies import get_page_params

logger = logging.getLogger("tracker.user_controller")

router = APIRouter(prefix="/users")

NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


def get_user_service(db: Session = Depends(get_db), tracer: Tracer = Depends(get_tracer)) -> UserService:
    return UserService(db, tracer)


@router.get("", name="GetUsers", response_model=PagedResult[UserOut], dependencies=[Depends(get_current_user)])
def list_users(
    request: Request,
    params: PageParams = Depends(get_page_params),
    service: UserService = Depends(get_user_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    """Get all users with pagination"""
    result = service.list(params)
    result.links = hateoas.generate_pagination_links(result, "User", RequestUrlResolver(request))
    return result


@router.get(
    "/{id}", name="GetUser", response_model=UserOut, responses=NOT_FOUND,
    dependencies=[Depends(get_current_user)],
)
def get_user(
    id: uuid.UUID,
    request: Request,
    service: UserService = Depends(get_user_service),
    hateoas: HateoasService = Depends(HateoasService),
):
    user = service.get(id)
    if user is None:
        raise EntityNotFound("User", id)
    out = UserOut.model_validate(user)
    out.links = hateoas.generate_resource_links("User", id, RequestUrlResolver(request))
    return out


@router.post("", name="CreateUser", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    request: Request,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    """Register a new user (open endpoint)"""
    logger.info("New user registration attempt", extra={"email": data.email})
    try:
        user = service.create(data)
    except IntegrityError as e:
        service.db.rollback()
        logger.error("Integrity error during registration", extra={"email": data.email, "error": str(e)})
        raise HTTPException(status_code=400, detail="User with provided email already exists")
    response.headers["Location"] = str(request.url_for("GetUser", id=str(user.id)))
    return user


@router.put(
    "/{id}", name="UpdateUser", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND,
    dependencies=[Depends(get_current_user)],
)
def update_user(id: uuid.UUID, data: UserUpdate, service: UserService = Depends(get_user_service)):
    if id != data.id:
        logger.warning("Path id does not match body id", extra={"path_id": str(id), "body_id": str(data.id)})
        return Response(status_code=status.HTTP_400_BAD_REQUEST)
    service.update(id, data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{id}", name="DeleteUser", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND,
    dependencies=[Depends(get_current_user)],
)
def delete_user(id: uuid.UUID, service: UserService = Depends(get_user_service)):
    if not service.delete(id):
        raise EntityNotFound("User", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
