"""Admin console API."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from safecircle.core.deps import require_admin
from safecircle.db.session import get_db
from safecircle.models.user import User
from safecircle.schemas.admin import AdminStats, AdminUserResponse, AdminUserUpdate
from safecircle.schemas.feedback import FeedbackWithAuthor
from safecircle.services import admin_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStats)
def stats(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return admin_service.get_stats(db)


@router.get("/users", response_model=list[AdminUserResponse])
def list_users(
    q: str | None = Query(default=None, max_length=100),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return admin_service.list_users(db, q)


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
def edit_user(
    user_id: int,
    data: AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return admin_service.update_user(db, user_id, data.name, data.phone, data.address)


@router.post("/users/{user_id}/role", response_model=AdminUserResponse)
def toggle_role(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Switch a user between the ``user`` and ``admin`` roles."""
    return admin_service.toggle_role(db, admin, user_id)


@router.post("/users/{user_id}/suspend", response_model=AdminUserResponse)
def suspend_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return admin_service.set_active(db, admin, user_id, False)


@router.post("/users/{user_id}/activate", response_model=AdminUserResponse)
def activate_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return admin_service.set_active(db, admin, user_id, True)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    admin_service.delete_user(db, admin, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/feedback", response_model=list[FeedbackWithAuthor])
def list_feedback(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return admin_service.list_feedback(db)


@router.delete("/feedback/{feedback_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    admin_service.delete_feedback(db, feedback_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
