"""Authentication service and the request-scoped identity dependencies."""
import logging
from datetime import datetime, timedelta, UTC
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from campusdesk.database import get_db
from campusdesk.errors import InvalidInputError, NotFoundError, UnauthorizedError
from campusdesk.utils import utcnow
from .models import (
    User, TokenData, UserCreate, StudentProfile, Role,
    SECRET_KEY, ALGORITHM,
)
from .permissions import Action, Resource, RoleName, can

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a new access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(UTC) + expires_delta
        else:
            expire = datetime.now(UTC) + timedelta(minutes=15)
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

    def create_token_for(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        return self.create_access_token(
            data={"sub": user.email, "user_id": user.id, "roles": [user.role_name]},
            expires_delta=expires_delta,
        )

    def verify_token(self, token: str) -> TokenData:
        """Verify and decode a JWT token."""
        try:
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        except JWTError:
            raise UnauthorizedError("Could not validate credentials")
        email: str = payload.get("sub")
        user_id: int = payload.get("user_id")
        if email is None or user_id is None:
            raise UnauthorizedError("Could not validate credentials")
        return TokenData(email=email, user_id=user_id, roles=payload.get("roles", []))

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Authenticate a user with email and password."""
        user = self.db.query(User).filter(User.email == email).first()
        if not user or not user.verify_password(password):
            return None
        if not user.is_active:
            raise InvalidInputError("Inactive user")
        user.last_login = utcnow()
        self.db.commit()
        return user

    def register_user(self, user_data: UserCreate, role_id: Optional[int] = None) -> User:
        """Register a new user.

        Without ``role_id`` the account is a Student with its own student
        profile. Only administrator routes pass another role.
        """
        if self.db.query(User).filter(User.email == user_data.email).first():
            raise InvalidInputError("Email already registered")
        if role_id is None:
            role = self.db.query(Role).filter(Role.name == RoleName.student.value).first()
        else:
            role = self.db.get(Role, role_id)
        if role is None:
            raise InvalidInputError("Unknown role")

        user = User(
            email=user_data.email,
            full_name=user_data.full_name,
            role_id=role.id
        )
        user.set_password(user_data.password)
        if role.name == RoleName.student.value:
            user.student_profile = StudentProfile()

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Registered user {user.id} ({user.email}) as {role.name}")
        return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Dependency to get the current user from the JWT token."""
    token_data = AuthService(db).verify_token(token)
    user = db.get(User, token_data.user_id)
    if user is None:
        raise UnauthorizedError("Could not validate credentials")
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to get the current active user."""
    if not current_user.is_active:
        raise UnauthorizedError("Inactive user")
    return current_user


def require(resource: Resource, action: Action) -> Callable[..., User]:
    """Build a dependency that admits only callers allowed ``action`` on ``resource``."""

    def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if not can(current_user, resource, action):
            logger.info(
                f"User {current_user.id} denied {resource.value}:{action.value}"
            )
            raise UnauthorizedError()
        return current_user

    return dependency


def get_current_student(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> StudentProfile:
    """Dependency resolving the caller's student profile."""
    profile = db.query(StudentProfile).filter(StudentProfile.user_id == current_user.id).first()
    if profile is None:
        raise NotFoundError("Student profile not found")
    return profile
