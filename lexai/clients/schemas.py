from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date
from lexai.models import ClientOrigin, CaseType, ClientStatus
from lexai.finances.schemas import ClientFinancials, PaymentPlanForm

# Base schemas
class ClientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = ""
    phone: Optional[str] = ""
    cpf_cnpj: Optional[str] = ""
    rg: Optional[str] = None
    rg_issuing_body: Optional[str] = None
    nationality: Optional[str] = None
    birth_date: Optional[date] = None
    marital_status: Optional[str] = None
    profession: Optional[str] = None
    monthly_income: Optional[float] = Field(None, ge=0)

    # Address
    address: Optional[str] = None
    address_number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = Field(None, max_length=2)
    zip_code: Optional[str] = None

    # Case
    origin: ClientOrigin = ClientOrigin.PRIVATE
    case_number: Optional[str] = ""
    case_type: CaseType = CaseType.CIVIL
    case_description: Optional[str] = ""
    status: ClientStatus = ClientStatus.ACTIVE

class ClientCreate(ClientBase):
    # Optional payment plan captured at registration
    payment_plan: Optional[PaymentPlanForm] = None

class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    cpf_cnpj: Optional[str] = None
    rg: Optional[str] = None
    rg_issuing_body: Optional[str] = None
    nationality: Optional[str] = None
    birth_date: Optional[date] = None
    marital_status: Optional[str] = None
    profession: Optional[str] = None
    monthly_income: Optional[float] = Field(None, ge=0)
    address: Optional[str] = None
    address_number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = Field(None, max_length=2)
    zip_code: Optional[str] = None
    origin: Optional[ClientOrigin] = None
    case_number: Optional[str] = None
    case_type: Optional[CaseType] = None
    case_description: Optional[str] = None
    status: Optional[ClientStatus] = None

class ClientResponse(ClientBase):
    id: str
    user_id: str
    financials: Optional[ClientFinancials] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ClientListResponse(BaseModel):
    id: str
    name: str
    cpf_cnpj: Optional[str] = None
    phone: Optional[str] = None
    origin: ClientOrigin
    case_number: Optional[str] = None
    case_type: CaseType
    status: ClientStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
