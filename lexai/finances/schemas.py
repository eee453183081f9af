from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from enum import Enum
from lexai.models import ClientOrigin, CaseType, PaymentMethod, PaymentPlan, VoucherStatus, InstallmentStatus

PAYMENT_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

# Financial record
class Installment(BaseModel):
    id: str
    number: int = Field(..., ge=1)
    value: float
    due_date: date
    paid_at: Optional[datetime] = None
    status: InstallmentStatus = InstallmentStatus.PENDING
    description: Optional[str] = None

class ClientFinancials(BaseModel):
    total_agreed: float = 0
    initial_payment: Optional[float] = None
    initial_payment_status: Optional[InstallmentStatus] = None
    initial_payment_paid_at: Optional[datetime] = None
    success_fee_percentage: Optional[float] = None
    success_fee_status: Optional[InstallmentStatus] = None
    success_fee_paid_at: Optional[datetime] = None
    benefit_installments_count: Optional[int] = None
    method: PaymentMethod = PaymentMethod.PIX
    plan: PaymentPlan = PaymentPlan.INSTALLMENTS
    installments: List[Installment] = []

    # Public defender certificates
    defensoria_voucher_70: Optional[str] = None
    defensoria_status_70: Optional[VoucherStatus] = None
    defensoria_value_70: Optional[float] = None
    defensoria_payment_month_70: Optional[str] = Field(None, pattern=PAYMENT_MONTH_PATTERN)
    defensoria_voucher_30: Optional[str] = None
    defensoria_status_30: Optional[VoucherStatus] = None
    defensoria_value_30: Optional[float] = None
    defensoria_payment_month_30: Optional[str] = Field(None, pattern=PAYMENT_MONTH_PATTERN)
    defensoria_voucher_100: Optional[str] = None
    defensoria_status_100: Optional[VoucherStatus] = None
    defensoria_value_100: Optional[float] = None
    defensoria_payment_month_100: Optional[str] = Field(None, pattern=PAYMENT_MONTH_PATTERN)
    has_recourse: bool = False
    appointment_date: Optional[date] = None

    due_day: Optional[int] = Field(None, ge=1, le=31)
    labor_final_value: Optional[float] = None
    labor_payment_date: Optional[date] = None

# Payment plan form
class PaymentPlanForm(BaseModel):
    total_agreed: float = Field(0, ge=0)
    initial_payment: Optional[float] = Field(None, ge=0)
    initial_payment_status: Optional[InstallmentStatus] = None
    success_fee_percentage: Optional[float] = Field(None, ge=0, le=100)
    benefit_installments_count: Optional[int] = Field(None, ge=0)
    method: Optional[PaymentMethod] = None
    plan: Optional[PaymentPlan] = None
    num_installments: int = Field(1, ge=1, le=60)
    due_day: int = Field(10, ge=1, le=31)

    defensoria_voucher_70: Optional[str] = None
    defensoria_status_70: VoucherStatus = VoucherStatus.AWAITING_SENTENCE
    defensoria_value_70: Optional[float] = None
    defensoria_payment_month_70: Optional[str] = Field(None, pattern=PAYMENT_MONTH_PATTERN)
    defensoria_voucher_30: Optional[str] = None
    defensoria_status_30: VoucherStatus = VoucherStatus.PENDING
    defensoria_value_30: Optional[float] = None
    defensoria_payment_month_30: Optional[str] = Field(None, pattern=PAYMENT_MONTH_PATTERN)
    defensoria_voucher_100: Optional[str] = None
    defensoria_status_100: VoucherStatus = VoucherStatus.PENDING
    defensoria_value_100: Optional[float] = None
    defensoria_payment_month_100: Optional[str] = Field(None, pattern=PAYMENT_MONTH_PATTERN)
    has_recourse: bool = False
    appointment_date: Optional[date] = None

    labor_final_value: Optional[float] = None
    labor_payment_date: Optional[date] = None

# Ledger
class LedgerTab(str, Enum):
    GENERAL = "general"
    PRIVATE = "private"
    PUBLIC_DEFENDER = "public_defender"

class LedgerItem(BaseModel):
    id: str
    client_id: str
    client_name: str
    origin: ClientOrigin
    case_type: CaseType
    label: str
    item_date: Optional[date] = None
    value: float
    status: str
    method: Optional[PaymentMethod] = None
    payment_month: Optional[str] = None
    is_particular: bool = False
    is_estimated: bool = False
    is_expectancy: bool = False

class LedgerTotals(BaseModel):
    received: float = 0
    receivable: float = 0
    pending_by_institution: float = 0

class LedgerGroup(BaseModel):
    client_id: str
    client_name: str
    latest_date: Optional[date] = None
    items: List[LedgerItem]

class LedgerResponse(BaseModel):
    tab: LedgerTab
    search: str = ""
    totals: LedgerTotals
    groups: List[LedgerGroup]

class ToggleRequest(BaseModel):
    item_id: str = Field(..., min_length=1)
    current_status: Optional[str] = None

class Notification(BaseModel):
    type: str  # success, info, alert
    title: str
    message: str

class ToggleResponse(BaseModel):
    client_id: str
    item_id: str
    status: str
    financials: ClientFinancials
    notification: Notification
