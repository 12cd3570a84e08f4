"""User directory API."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from safecircle.core.config import settings
from safecircle.core.deps import get_current_user
from safecircle.db.session import get_db
from safecircle.models.user import User
from safecircle.schemas.user import UserCard, UserSearchResult
from safecircle.services.directory_service import get_user_card, search_users

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=list[UserSearchResult])
def search(
    q: str = Query(default="", max_length=100),
    limit: int | None = Query(default=None, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Prefix search over usernames and names, excluding the caller."""
    return search_users(db, current_user.id, q, limit or settings.search_result_limit)


@router.get("/{user_id}", response_model=UserCard)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = get_user_card(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
