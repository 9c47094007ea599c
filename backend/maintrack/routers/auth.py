"""Auth endpoints."""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..auth import (
    authenticate_user,
    create_access_token,
    get_current_user,
    get_password_hash,
)
from ..config import settings
from ..database import get_db
from ..models import User
from ..schemas import (
    EquipmentBrief,
    LoginRequest,
    SignupRequest,
    SignupResponse,
    TokenResponse,
    UserResponse,
)
from ..use_cases.portal_signup import register_portal_user_use_case

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _set_no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store"
    response.headers["Pragma"] = "no-cache"


def _token_response(user: User) -> TokenResponse:
    expires_in = int(settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES) * 60
    access_token = create_access_token(
        {"sub": str(user.id), "role": user.role},
        expires_delta=timedelta(seconds=expires_in),
    )
    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Login with email and password."""
    _set_no_store(response)
    user = authenticate_user(db, payload.email, payload.password)
    if user is None:
        logger.info("Failed login attempt for %s", payload.email.strip().lower())
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(user)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, response: Response, db: Session = Depends(get_db)):
    """Register a portal user and hand out starter equipment when available."""
    _set_no_store(response)
    user, assigned = register_portal_user_use_case(
        db=db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        hash_password=get_password_hash,
    )
    return SignupResponse(
        user=UserResponse.model_validate(user),
        assigned_equipment=[EquipmentBrief.model_validate(item) for item in assigned],
    )


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return current_user
