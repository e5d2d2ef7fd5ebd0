import logging
import uuid
from typing import Optional
from fastapi import HTTPException
from app.core.security import get_password_hash, verify_password
from app.models.user import User
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services.entity_service import EntityService

logger = logging.getLogger("tracker.user_service")


class UserService(EntityService):
    model = User
    out_schema = UserOut
    resource = "User"

    def _ensure_email_free(self, email: str, user_id: Optional[uuid.UUID] = None) -> None:
        query = self.db.query(User).filter(User.email == email)
        if user_id is not None:
            query = query.filter(User.id != user_id)
        if query.first():
            raise HTTPException(status_code=400, detail="User with provided email already exists")

    def _create_values(self, data: UserCreate) -> dict:
        values = data.model_dump(exclude={"password"})
        values["password_hash"] = get_password_hash(data.password)
        return values

    def _update_values(self, data: UserUpdate) -> dict:
        values = data.model_dump(exclude={"id", "password"})
        values["password_hash"] = get_password_hash(data.password)
        return values

    def create(self, data: UserCreate) -> User:
        self._ensure_email_free(data.email)
        return super().create(data)

    def update(self, entity_id: uuid.UUID, data: UserUpdate) -> User:
        self._ensure_email_free(data.email, entity_id)
        return super().update(entity_id, data)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def authenticate(self, email: str, password: str) -> Optional[User]:
        with self._span("authenticate") as span:
            user = self.get_by_email(email)
            if user is None or not verify_password(password, user.password_hash):
                span.set_attribute("auth.success", False)
                logger.warning("Authentication failed", extra={"email": email})
                return None
            span.set_attribute("auth.success", True)
            return user
