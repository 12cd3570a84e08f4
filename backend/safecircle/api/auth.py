"""Auth endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from safecircle.core.deps import get_current_user
from safecircle.core.security import create_access_token
from safecircle.db.session import get_db
from safecircle.models.user import User
from safecircle.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserMe
from safecircle.services.auth_service import authenticate_user, create_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserMe, status_code=201)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Register a new user."""
    return create_user(db, data)


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Login and return access token."""
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_access_token(subject=user.id)
    return TokenResponse(access_token=token, user_id=user.id)


@router.get("/me", response_model=UserMe)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user
