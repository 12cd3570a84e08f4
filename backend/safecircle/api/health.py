"""Liveness endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from safecircle.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)) -> dict:
    """Report ok once the database answers."""
    db.execute(text("SELECT 1"))
    return {"status": "ok"}
