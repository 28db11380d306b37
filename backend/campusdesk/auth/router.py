"""Authentication router for handling user authentication endpoints."""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from campusdesk.database import get_db
from campusdesk.errors import UnauthorizedError
from .models import AdminUserCreate, User, Token, UserCreate, UserResponse, ACCESS_TOKEN_EXPIRE_MINUTES
from .permissions import Action, Resource
from .service import AuthService, get_current_active_user, require

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get an instance of AuthService."""
    return AuthService(db)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: UserCreate,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new student account."""
    return service.register_user(user_data)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: AdminUserCreate,
    current_user: User = Depends(require(Resource.users, Action.manage)),
    service: AuthService = Depends(get_auth_service)
):
    """Create an account with any role."""
    return service.register_user(user_data, role_id=user_data.role_id)


@router.post("/login", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_auth_service)
):
    """OAuth2 compatible token login, get an access token for future requests."""
    try:
        user = service.authenticate_user(form_data.username, form_data.password)
        if not user:
            raise UnauthorizedError("Incorrect email or password")

        access_token = service.create_token_for(
            user, expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        return {"access_token": access_token, "token_type": "bearer"}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Login failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log in"
        )


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_active_user)):
    """Get the current user's profile."""
    return current_user
