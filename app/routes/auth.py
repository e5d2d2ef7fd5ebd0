import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from opentelemetry.trace import Tracer
from sqlalchemy.orm import Session
from app.core.security import create_access_token
from app.core.tracing import get_tracer
from app.database import get_db
from app.schemas.user import Token
from app.services.user_service import UserService

logger = logging.getLogger("tracker.auth")

router = APIRouter(prefix="/auth")


@router.post("/login", name="Login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    tracer: Tracer = Depends(get_tracer),
):
    """Exchange e-mail (sent as ``username``) and password for a bearer token"""
    logger.info("Login request received", extra={"email": form_data.username})

    user = UserService(db, tracer).authenticate(form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    logger.info("Login successful", extra={"email": user.email})
    return Token(access_token=token)
