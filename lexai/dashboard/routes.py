from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional, Dict, List
from datetime import date
import logging

from lexai.database import get_db
from lexai.models import User, Movement, ClientOrigin, ClientStatus, MovementType, InstallmentStatus
from lexai.auth.dependencies import get_current_user
from lexai.dashboard.schemas import (
    DashboardResponse, RecentClient, ReportSummary, CaseTypeSummary, OriginCount, FinancialSummary
)
from lexai.movements.schemas import MovementResponse
from lexai.services import agenda_service, ledger_service
from lexai.services.client_service import ClientService
from lexai.utils.format import format_currency_short, get_initials

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboard"])

RECENT_CLIENTS = 3


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Headline counters of the office plus the next critical dates and newest clients."""
    today = date.today()
    clients = ClientService(db).get_clients_for_user(current_user)
    movements = db.query(Movement).filter(Movement.user_id == current_user.id).all()

    private_total = 0.0
    for client in clients:
        if ClientOrigin(client.origin) != ClientOrigin.PRIVATE:
            continue
        fin = ledger_service.financials_of(client)
        private_total += fin.total_agreed if fin else 0

    upcoming = [m for m in movements if m.date >= today]
    next_movements, _ = agenda_service.paginate(agenda_service.critical_movements(movements, today))

    return DashboardResponse(
        active_clients=sum(1 for c in clients if ClientStatus(c.status) == ClientStatus.ACTIVE),
        upcoming_deadlines=sum(1 for m in upcoming if MovementType(m.type) == MovementType.DEADLINE),
        hearings=sum(1 for m in upcoming if MovementType(m.type) == MovementType.HEARING),
        private_billing_estimate=private_total,
        private_billing_label=format_currency_short(private_total),
        next_movements=[MovementResponse.model_validate(m) for m in next_movements],
        recent_clients=[
            RecentClient(
                id=c.id,
                name=c.name,
                initials=get_initials(c.name),
                origin=c.origin,
                created_at=c.created_at,
            )
            for c in clients[:RECENT_CLIENTS]
        ],
    )


@router.get("/reports/summary", response_model=ReportSummary)
def report_summary(
    origin: Optional[ClientOrigin] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Client counts per case type and origin with the financial summary, optionally for one origin."""
    clients = ClientService(db).get_clients_for_user(current_user, origin=origin)

    by_type: Dict[str, List[float]] = {}
    origin_counts = {o: 0 for o in ClientOrigin}
    total_agreed = total_initial = total_pending = 0.0

    for client in clients:
        origin_counts[ClientOrigin(client.origin)] += 1

        fin = ledger_service.financials_of(client)
        by_type.setdefault(client.case_type, []).append(fin.total_agreed if fin else 0)
        if fin is None:
            continue
        total_agreed += fin.total_agreed
        total_initial += fin.initial_payment or 0
        total_pending += sum(i.value for i in fin.installments if i.status != InstallmentStatus.PAID)

    case_types = []
    for case_type, group in by_type.items():
        agreed = sum(group)
        case_types.append(CaseTypeSummary(
            case_type=case_type,
            clients=len(group),
            total_agreed=agreed,
            average_ticket=agreed / len(group),
        ))
    case_types.sort(key=lambda s: s.clients, reverse=True)

    return ReportSummary(
        origin=origin,
        total_clients=len(clients),
        by_case_type=case_types,
        by_origin=[OriginCount(origin=o, clients=n) for o, n in origin_counts.items()],
        financial=FinancialSummary(
            total_agreed=total_agreed,
            total_initial=total_initial,
            total_pending_installments=total_pending,
        ),
        ledger=ledger_service.aggregate(ledger_service.expand_ledger(clients, date.today())),
    )
