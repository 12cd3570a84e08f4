"""Profile and feedback API."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from safecircle.core.deps import get_current_user
from safecircle.db.session import get_db
from safecircle.models.user import User
from safecircle.schemas.feedback import FeedbackCreate, FeedbackResponse
from safecircle.schemas.user import ProfileResponse, ProfileUpdate, UsernameUpdate
from safecircle.services import profile_service

router = APIRouter(tags=["profile"])


@router.get("/profile/me", response_model=ProfileResponse)
def get_my_profile(current_user: User = Depends(get_current_user)):
    """Current user's profile. ``is_profile_complete`` stays false until details are saved."""
    return current_user


@router.put("/profile/me", response_model=ProfileResponse)
def update_my_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return profile_service.update_details(db, current_user, data.name, data.phone, data.address)


@router.put("/profile/me/username", response_model=ProfileResponse)
def update_my_username(
    data: UsernameUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return profile_service.update_username(db, current_user, data.username)


@router.post("/feedback", response_model=FeedbackResponse, status_code=201)
def submit_feedback(
    data: FeedbackCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return profile_service.submit_feedback(db, current_user, data.message)
