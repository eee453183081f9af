from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class SettingsUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    oab: Optional[str] = None
    oab_state: Optional[str] = Field(None, max_length=2)
    cpf: Optional[str] = None
    address: Optional[str] = None
    profile_image: Optional[str] = None
    logo: Optional[str] = None
    share_logo: Optional[bool] = None
    notify_deadlines: Optional[bool] = None
    deadline_threshold_days: Optional[int] = Field(None, ge=0, le=60)

class SettingsResponse(BaseModel):
    id: str
    name: Optional[str] = ""
    email: Optional[str] = ""
    role: Optional[str] = ""
    oab: Optional[str] = ""
    oab_state: Optional[str] = ""
    cpf: Optional[str] = ""
    address: Optional[str] = ""
    profile_image: Optional[str] = None
    logo: Optional[str] = None
    share_logo: bool = False
    notify_deadlines: bool = True
    deadline_threshold_days: int = 3
    google_connected: bool = False
    google_email: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class GoogleConnect(BaseModel):
    access_token: str = Field(..., min_length=1)
    email: Optional[str] = None
