"""Friends and friend requests API."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from safecircle.core.deps import get_current_user
from safecircle.db.session import get_db
from safecircle.models.user import User
from safecircle.schemas.friends import FriendRequestCreate, FriendRequestResponse, FriendResponse
from safecircle.services import friend_service

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("", response_model=list[FriendResponse])
def list_friends(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Current user's friends, by name."""
    return friend_service.list_friends(db, current_user.id)


@router.delete("/{friend_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_friend(
    friend_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove a friend on both sides."""
    friend_service.remove_friend(db, current_user.id, friend_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/requests", response_model=FriendRequestResponse, status_code=201)
def send_request(
    data: FriendRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return friend_service.send_request(db, current_user, data.to_user_id)


@router.get("/requests/incoming", response_model=list[FriendRequestResponse])
def incoming_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pending requests addressed to the current user."""
    return friend_service.list_incoming_requests(db, current_user.id)


@router.get("/requests/outgoing", response_model=list[FriendRequestResponse])
def outgoing_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pending requests sent by the current user."""
    return friend_service.list_outgoing_requests(db, current_user.id)


@router.get("/requests/{request_id}", response_model=FriendRequestResponse)
def get_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return friend_service.get_request(db, request_id, current_user.id)


@router.post("/requests/{request_id}/accept", response_model=FriendRequestResponse)
def accept_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return friend_service.accept_request(db, request_id, current_user)


@router.post("/requests/{request_id}/reject", response_model=FriendRequestResponse)
def reject_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return friend_service.reject_request(db, request_id, current_user)


@router.post("/requests/{request_id}/cancel", response_model=FriendRequestResponse)
def cancel_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return friend_service.cancel_request(db, request_id, current_user)
