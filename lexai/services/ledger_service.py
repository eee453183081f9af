"""
Financial ledger derivations.

Every money figure shown by the finances table, the dashboard and the PDF
report is derived here from the clients' financial records. All functions
are pure: they take in-memory records and return new values, persistence is
left to the caller.
"""
from typing import Iterable, List, Optional, Tuple, Dict
from datetime import date, datetime
import logging

from lexai.models import ClientOrigin, CaseType, InstallmentStatus, VoucherStatus
from lexai.finances.schemas import (
    ClientFinancials, LedgerItem, LedgerTotals, LedgerGroup, LedgerTab
)

logger = logging.getLogger(__name__)

PAID_STATUSES = {InstallmentStatus.PAID.value, VoucherStatus.PAID_BY_STATE.value}
# Displayed status strings that count as settled when toggling
SETTLED_LABELS = {"PAID", "PAGO", "LIQUIDATED", "LIQUIDADO"}

INSTALLMENT_PREFIX = "inst_"
ENTRY_PREFIX = "in-"
SUCCESS_PREFIX = "success-"
CERTIFICATE_PREFIX = "def"


class LedgerError(Exception):
    pass


class NotTogglableError(LedgerError):
    pass


class LineItemNotFound(LedgerError):
    pass


def is_paid(status: Optional[str]) -> bool:
    return (status or "").lower() in PAID_STATUSES


def financials_of(client) -> Optional[ClientFinancials]:
    """Return the client's financial record as a schema object, or None."""
    raw = getattr(client, "financials", None)
    if raw is None:
        return None
    if isinstance(raw, ClientFinancials):
        return raw
    return ClientFinancials.model_validate(raw)


def _value(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _month_start(month: Optional[str]) -> Optional[date]:
    if not month:
        return None
    try:
        year, mon = month.split("-")
        return date(int(year), int(mon), 1)
    except ValueError:
        logger.warning(f"Ignoring malformed payment month {month!r}")
        return None


def _created_on(client) -> Optional[date]:
    created = getattr(client, "created_at", None)
    if isinstance(created, datetime):
        return created.date()
    return created


# =====================================================
# LINE EXPANSION
# =====================================================

def expand_client(client, today: Optional[date] = None) -> List[LedgerItem]:
    """
    Turn one client's financial record into ledger line items.

    Private clients yield an entry payment line, one line per installment and
    a success-fee expectancy line. Public-defender clients yield certificate
    lines: 70% plus an optional 30% recourse line for criminal cases, a
    single 100% line otherwise. Clients without financials yield nothing.
    """
    fin = financials_of(client)
    if fin is None:
        return []

    today = today or date.today()
    origin = ClientOrigin(_value(client.origin))
    case_type = CaseType(_value(client.case_type))

    base = dict(
        client_id=client.id,
        client_name=client.name,
        origin=origin,
        case_type=case_type,
        method=fin.method,
    )

    if origin == ClientOrigin.PRIVATE:
        return _expand_private(client, fin, base, today)
    return _expand_defender(client, fin, base, case_type)


def _expand_private(client, fin: ClientFinancials, base: dict, today: date) -> List[LedgerItem]:
    items = []

    if fin.initial_payment:
        status = fin.initial_payment_status or InstallmentStatus.PAID
        items.append(LedgerItem(
            id=f"{ENTRY_PREFIX}{client.id}",
            label="ENTRY PAYMENT",
            item_date=_created_on(client),
            value=fin.initial_payment,
            status=_value(status),
            is_particular=True,
            **base
        ))

    for inst in fin.installments:
        items.append(LedgerItem(
            id=inst.id,
            label=f"INSTALLMENT {inst.number:02d}",
            item_date=inst.due_date,
            value=inst.value,
            status=_value(inst.status),
            is_particular=True,
            **base
        ))

    pct = fin.success_fee_percentage or 0
    if pct > 0:
        if fin.labor_final_value and fin.labor_final_value > 0:
            value = fin.labor_final_value
        else:
            value = fin.total_agreed * pct / 100

        settled_by_date = fin.labor_payment_date is not None and fin.labor_payment_date <= today
        if fin.success_fee_status == InstallmentStatus.PAID or settled_by_date:
            status = InstallmentStatus.PAID.value
        else:
            status = _value(fin.success_fee_status or InstallmentStatus.PENDING)

        label = f"SUCCESS FEE ({pct:g}%)"
        if base["case_type"] == CaseType.SOCIAL_SECURITY:
            label += f" + {fin.benefit_installments_count or 0} BENEFIT INST."

        items.append(LedgerItem(
            id=f"{SUCCESS_PREFIX}{client.id}",
            label=label,
            item_date=fin.labor_payment_date,
            value=value,
            status=status,
            is_particular=True,
            is_expectancy=True,
            **base
        ))

    return items


def _certificate_line(client, base: dict, suffix: str, label: str, stored_value, estimate: float,
                      status, payment_month: Optional[str], fin: ClientFinancials) -> LedgerItem:
    return LedgerItem(
        id=f"{CERTIFICATE_PREFIX}{suffix}-{client.id}",
        label=label,
        item_date=_month_start(payment_month) or fin.appointment_date or _created_on(client),
        value=stored_value or estimate,
        status=_value(status or VoucherStatus.PENDING),
        payment_month=payment_month,
        is_particular=False,
        is_estimated=not stored_value,
        **base
    )


def _expand_defender(client, fin: ClientFinancials, base: dict, case_type: CaseType) -> List[LedgerItem]:
    if case_type == CaseType.CRIMINAL:
        items = [_certificate_line(
            client, base, "70", "CERTIFICATE (70%)",
            fin.defensoria_value_70, fin.total_agreed * 0.7,
            fin.defensoria_status_70, fin.defensoria_payment_month_70, fin
        )]
        if fin.has_recourse:
            items.append(_certificate_line(
                client, base, "30", "CERTIFICATE (30%)",
                fin.defensoria_value_30, fin.total_agreed * 0.3,
                fin.defensoria_status_30, fin.defensoria_payment_month_30, fin
            ))
        return items

    return [_certificate_line(
        client, base, "100", "FULL CERTIFICATE",
        fin.defensoria_value_100, fin.total_agreed,
        fin.defensoria_status_100, fin.defensoria_payment_month_100, fin
    )]


def expand_ledger(clients: Iterable, today: Optional[date] = None) -> List[LedgerItem]:
    today = today or date.today()
    items = []
    for client in clients:
        items.extend(expand_client(client, today))
    return items


# =====================================================
# AGGREGATION
# =====================================================

def filter_items(items: Iterable[LedgerItem], tab: LedgerTab = LedgerTab.GENERAL, search: str = "") -> List[LedgerItem]:
    """Keep items matching the origin tab and a case-insensitive client name search."""
    needle = (search or "").strip().lower()
    result = []
    for item in items:
        if tab == LedgerTab.PRIVATE and item.origin != ClientOrigin.PRIVATE:
            continue
        if tab == LedgerTab.PUBLIC_DEFENDER and item.origin != ClientOrigin.PUBLIC_DEFENDER:
            continue
        if needle and needle not in item.client_name.lower():
            continue
        result.append(item)
    return result


def aggregate(items: Iterable[LedgerItem]) -> LedgerTotals:
    """Sum line items into received, receivable and pending-by-institution buckets."""
    totals = LedgerTotals()
    for item in items:
        if is_paid(item.status):
            totals.received += item.value
        elif item.origin == ClientOrigin.PRIVATE:
            totals.receivable += item.value
        else:
            totals.pending_by_institution += item.value
    return totals


def _sort_key(item: LedgerItem) -> date:
    return item.item_date or date.min


def group_by_client(items: Iterable[LedgerItem]) -> List[LedgerGroup]:
    """Group items per client, newest first inside and across groups."""
    buckets: Dict[str, List[LedgerItem]] = {}
    for item in items:
        buckets.setdefault(item.client_id, []).append(item)

    groups = []
    for client_id, group_items in buckets.items():
        group_items.sort(key=_sort_key, reverse=True)
        groups.append(LedgerGroup(
            client_id=client_id,
            client_name=group_items[0].client_name,
            latest_date=group_items[0].item_date,
            items=group_items,
        ))

    groups.sort(key=lambda g: g.latest_date or date.min, reverse=True)
    return groups


# =====================================================
# STATUS TOGGLE
# =====================================================

def _is_settled_label(status: Optional[str]) -> bool:
    return (status or "").strip().upper() in SETTLED_LABELS


def toggle_payment_status(
    financials: Optional[ClientFinancials],
    item_id: str,
    current_status: str,
    now: Optional[datetime] = None
) -> Tuple[Optional[ClientFinancials], bool]:
    """
    Flip a private line item between paid and pending.

    Returns the new financials object and whether the item is now paid.
    The input object is left untouched. Certificate lines are only changed
    through the payment plan form and raise NotTogglableError.
    """
    if financials is None:
        return None, False

    now = now or datetime.utcnow()
    is_paying = not _is_settled_label(current_status)
    new_status = InstallmentStatus.PAID if is_paying else InstallmentStatus.PENDING
    paid_at = now if is_paying else None

    updated = financials.model_copy(deep=True)

    if item_id.startswith(INSTALLMENT_PREFIX):
        target = next((inst for inst in updated.installments if inst.id == item_id), None)
        if target is None:
            raise LineItemNotFound(f"Installment {item_id} not found")
        target.status = new_status
        target.paid_at = paid_at
    elif item_id.startswith(ENTRY_PREFIX):
        if not updated.initial_payment:
            raise LineItemNotFound(f"Entry payment {item_id} not found")
        updated.initial_payment_status = new_status
        updated.initial_payment_paid_at = paid_at
    elif item_id.startswith(SUCCESS_PREFIX):
        if not (updated.success_fee_percentage or 0) > 0:
            raise LineItemNotFound(f"Success fee {item_id} not found")
        updated.success_fee_status = new_status
        updated.success_fee_paid_at = paid_at
    else:
        raise NotTogglableError(f"Line item {item_id} cannot be toggled")

    logger.info(f"Ledger item {item_id} toggled to {new_status.value}")
    return updated, is_paying
