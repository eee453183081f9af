from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from lexai.database import get_db
from lexai.models import User
from lexai.auth.dependencies import get_current_user
from lexai.activity.schemas import ActivityLogResponse
from lexai.services.activity_service import recent_activity

router = APIRouter(prefix="/activity", tags=["Activity"])


@router.get("/", response_model=List[ActivityLogResponse])
def list_activity(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Most recent activity entries of the user, newest first."""
    return recent_activity(db, current_user)
