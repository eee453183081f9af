from pydantic import BaseModel, Field
from typing import Optional, List
import datetime as dt
from lexai.models import MovementType, Modality

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

class MovementBase(BaseModel):
    client_id: Optional[str] = None
    case_number: Optional[str] = ""
    date: dt.date
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    description: str = Field(..., min_length=1)
    type: MovementType = MovementType.DEADLINE
    modality: Optional[Modality] = None
    source: Optional[str] = ""

class MovementCreate(MovementBase):
    # Push to the connected Google Calendar right after saving
    sync_to_calendar: bool = False

class MovementUpdate(BaseModel):
    client_id: Optional[str] = None
    case_number: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    type: Optional[MovementType] = None
    modality: Optional[Modality] = None
    source: Optional[str] = None

class MovementResponse(MovementBase):
    id: str
    client_name: Optional[str] = None
    synced_to_google: bool = False
    google_event_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True

class MovementWriteResponse(BaseModel):
    movement: Optional[MovementResponse] = None
    calendar_synced: bool = False
    message: str

class CriticalPage(BaseModel):
    page: int
    total_pages: int
    total: int
    items: List[MovementResponse]

class CalendarDay(BaseModel):
    date: dt.date
    in_month: bool
    is_today: bool
    movements: List[MovementResponse] = []

class CalendarMonth(BaseModel):
    year: int
    month: int
    weeks: List[List[CalendarDay]]
    previous: dt.date
    next: dt.date
