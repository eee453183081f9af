from pydantic import BaseModel
from typing import Optional, Any
from datetime import datetime
from lexai.models import ActionType, EntityType

class ActivityLogResponse(BaseModel):
    id: str
    user_name: Optional[str] = None
    action_type: ActionType
    entity_type: EntityType
    entity_id: Optional[str] = None
    description: str
    details: Optional[Any] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
