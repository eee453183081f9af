from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from lexai.models import ClientOrigin, CaseType
from lexai.finances.schemas import LedgerTotals
from lexai.movements.schemas import MovementResponse

class RecentClient(BaseModel):
    id: str
    name: str
    initials: str
    origin: ClientOrigin
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DashboardResponse(BaseModel):
    active_clients: int
    upcoming_deadlines: int
    hearings: int
    private_billing_estimate: float
    private_billing_label: str
    next_movements: List[MovementResponse]
    recent_clients: List[RecentClient]

class CaseTypeSummary(BaseModel):
    case_type: CaseType
    clients: int
    total_agreed: float
    average_ticket: float

class OriginCount(BaseModel):
    origin: ClientOrigin
    clients: int

class FinancialSummary(BaseModel):
    total_agreed: float
    total_initial: float
    total_pending_installments: float

class ReportSummary(BaseModel):
    origin: Optional[ClientOrigin] = None
    total_clients: int
    by_case_type: List[CaseTypeSummary]
    by_origin: List[OriginCount]
    financial: FinancialSummary
    ledger: LedgerTotals
