from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import Optional, List, Any

from lexai.config import ACTIVITY_LOG_LIMIT
from lexai.models import ActivityLog, ActionType, EntityType, User


def record_activity(
    db: Session,
    user: User,
    action_type: ActionType,
    entity_type: EntityType,
    description: str,
    entity_id: Optional[str] = None,
    details: Any = None
) -> ActivityLog:
    """Stage an activity entry; it is committed together with the change it describes."""
    log = ActivityLog(
        user_id=user.id,
        user_name=user.name,
        action_type=action_type,
        entity_type=entity_type,
        entity_id=entity_id,
        description=description,
        details=details
    )
    db.add(log)
    return log


def recent_activity(db: Session, user: User, limit: int = ACTIVITY_LOG_LIMIT) -> List[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.user_id == user.id)
        .order_by(desc(ActivityLog.created_at))
        .limit(limit)
        .all()
    )
