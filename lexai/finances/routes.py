from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
from datetime import date, datetime
import logging

from lexai.database import get_db
from lexai.models import User, ClientOrigin, CaseType, ActionType, EntityType
from lexai.auth.dependencies import get_current_user
from lexai.finances.schemas import (
    PaymentPlanForm, ClientFinancials, LedgerTab, LedgerResponse,
    ToggleRequest, ToggleResponse, Notification
)
from lexai.services import ledger_service, pdf_service
from lexai.services.activity_service import record_activity
from lexai.services.client_service import ClientService
from lexai.services.plan_service import build_financials
from lexai.services.settings_service import get_or_create_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/finances", tags=["Finances"])


def _owned_client(db: Session, client_id: str, user: User):
    client = ClientService(db).get_client_for_user(client_id, user)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


# =====================================================
# PAYMENT PLAN
# =====================================================

@router.put("/{client_id}/plan", response_model=ClientFinancials)
def save_payment_plan(
    client_id: str,
    form: PaymentPlanForm,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Build the client's financial record from the payment plan form and store it."""
    client = _owned_client(db, client_id, current_user)
    existing = ledger_service.financials_of(client)
    financials = build_financials(
        ClientOrigin(client.origin), CaseType(client.case_type), form, existing, date.today()
    )

    client.financials = financials.model_dump(mode="json")
    record_activity(
        db, current_user, ActionType.UPDATE, EntityType.CLIENT,
        f"Plano de pagamento de {client.name} atualizado",
        entity_id=client.id,
        details={"plan": financials.plan.value, "total_agreed": financials.total_agreed}
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Payment plan persistence failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    return financials


# =====================================================
# LEDGER
# =====================================================

@router.get("/ledger", response_model=LedgerResponse)
def get_ledger(
    tab: LedgerTab = LedgerTab.GENERAL,
    search: str = Query("", max_length=255),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Line items of every owned client, grouped per client, with totals for the filtered view."""
    clients = ClientService(db).get_clients_for_user(current_user)
    items = ledger_service.expand_ledger(clients, date.today())
    visible = ledger_service.filter_items(items, tab, search)

    return LedgerResponse(
        tab=tab,
        search=search,
        totals=ledger_service.aggregate(visible),
        groups=ledger_service.group_by_client(visible),
    )


@router.post("/{client_id}/toggle", response_model=ToggleResponse)
def toggle_payment(
    client_id: str,
    request: ToggleRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Flip a private line item between paid and pending."""
    client = _owned_client(db, client_id, current_user)
    financials = ledger_service.financials_of(client)
    if financials is None:
        raise HTTPException(status_code=400, detail="Client has no financial record")
    if client.origin != ClientOrigin.PRIVATE:
        raise HTTPException(status_code=400, detail="Only private line items can be toggled")

    current_status = request.current_status
    if current_status is None:
        item = next(
            (i for i in ledger_service.expand_client(client, date.today()) if i.id == request.item_id),
            None
        )
        if item is None:
            raise HTTPException(status_code=404, detail="Line item not found")
        current_status = item.status

    try:
        updated, is_paying = ledger_service.toggle_payment_status(
            financials, request.item_id, current_status, datetime.utcnow()
        )
    except ledger_service.LineItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ledger_service.NotTogglableError as e:
        raise HTTPException(status_code=400, detail=str(e))

    new_status = "paid" if is_paying else "pending"
    client.financials = updated.model_dump(mode="json")
    record_activity(
        db, current_user, ActionType.UPDATE, EntityType.CLIENT,
        f"Pagamento de {client.name} marcado como {'pago' if is_paying else 'pendente'}",
        entity_id=client.id,
        details={"item_id": request.item_id, "status": new_status}
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Payment toggle failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    notification = Notification(
        type="success" if is_paying else "info",
        title="Pagamento Confirmado" if is_paying else "Pagamento Estornado",
        message=f"O status do lançamento de {client.name} foi alterado para {'PAGO' if is_paying else 'PENDENTE'}."
    )

    return ToggleResponse(
        client_id=client.id,
        item_id=request.item_id,
        status=new_status,
        financials=updated,
        notification=notification,
    )


# =====================================================
# REPORT
# =====================================================

@router.get("/report")
def financial_report(
    origin: Optional[ClientOrigin] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    clients = ClientService(db).get_clients_for_user(current_user, origin=origin)
    settings = get_or_create_profile(db, current_user)
    content, filename = pdf_service.generate_financial_report(clients, settings, date.today())
    logger.info(f"Financial report generated for {len(clients)} clients")

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
