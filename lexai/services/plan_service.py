from typing import Optional, List
from datetime import date, datetime
import calendar
import logging

from lexai.models import ClientOrigin, CaseType, PaymentMethod, PaymentPlan, InstallmentStatus
from lexai.finances.schemas import ClientFinancials, Installment, PaymentPlanForm

logger = logging.getLogger(__name__)

SUCCESS_FEE_DEFAULT = 20
SUCCESS_FEE_DEFAULT_CONTINGENT = 30
BENEFIT_INSTALLMENTS_DEFAULT = 3

DEFENDER_FIELDS = [
    "defensoria_voucher_70", "defensoria_status_70", "defensoria_value_70", "defensoria_payment_month_70",
    "defensoria_voucher_30", "defensoria_status_30", "defensoria_value_30", "defensoria_payment_month_30",
    "defensoria_voucher_100", "defensoria_status_100", "defensoria_value_100", "defensoria_payment_month_100",
    "has_recourse",
]


def default_plan(origin: ClientOrigin, case_type: CaseType) -> PaymentPlan:
    """Pick the payment plan a new record starts with."""
    if origin == ClientOrigin.PUBLIC_DEFENDER:
        return PaymentPlan.DEFENDER_STANDARD
    if case_type == CaseType.LABOR:
        return PaymentPlan.ON_SUCCESS
    if case_type == CaseType.SOCIAL_SECURITY:
        return PaymentPlan.SOCIAL_SECURITY_MIX
    return PaymentPlan.INSTALLMENTS


def installment_due_date(today: date, offset: int, due_day: int) -> date:
    """Due date `offset` months after today's month, clamped to the month length."""
    month_index = today.month - 1 + offset
    year = today.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))


def build_installments(
    total_agreed: float,
    initial_payment: float,
    count: int,
    due_day: int,
    existing: Optional[List[Installment]] = None,
    today: Optional[date] = None
) -> List[Installment]:
    """
    Split the remaining balance into `count` equal installments.

    Ids, due dates and statuses of installments already present at the same
    position are kept so re-saving a plan does not lose payment history.
    """
    today = today or date.today()
    existing = existing or []
    value = (total_agreed - (initial_payment or 0)) / count
    stamp = int(datetime.utcnow().timestamp() * 1000)

    installments = []
    for i in range(count):
        previous = existing[i] if i < len(existing) else None
        installments.append(Installment(
            id=previous.id if previous else f"inst_{stamp}_{i}",
            number=i + 1,
            value=value,
            due_date=previous.due_date if previous else installment_due_date(today, i + 1, due_day),
            status=previous.status if previous else InstallmentStatus.PENDING,
            paid_at=previous.paid_at if previous else None,
        ))
    return installments


def build_financials(
    origin: ClientOrigin,
    case_type: CaseType,
    form: PaymentPlanForm,
    existing: Optional[ClientFinancials] = None,
    today: Optional[date] = None
) -> ClientFinancials:
    """
    Build the financial record for a client from the payment plan form.

    Exactly one scheme is populated: installments for private plans paid over
    time, a success fee for contingent plans, or certificates for
    public-defender appointments.
    """
    today = today or date.today()
    plan = form.plan or default_plan(origin, case_type)
    if case_type == CaseType.LABOR and plan == PaymentPlan.INSTALLMENTS:
        plan = PaymentPlan.ON_SUCCESS

    if origin == ClientOrigin.PUBLIC_DEFENDER:
        data = {field: getattr(form, field) for field in DEFENDER_FIELDS}
        return ClientFinancials(
            total_agreed=form.total_agreed,
            method=form.method or PaymentMethod.STATE_CERTIFICATE,
            plan=PaymentPlan.DEFENDER_STANDARD,
            appointment_date=form.appointment_date or today,
            installments=[],
            **data
        )

    financials = ClientFinancials(
        total_agreed=form.total_agreed,
        initial_payment=form.initial_payment or None,
        initial_payment_status=form.initial_payment_status or (existing.initial_payment_status if existing else None),
        initial_payment_paid_at=existing.initial_payment_paid_at if existing else None,
        method=form.method or PaymentMethod.PIX,
        plan=plan,
        due_day=form.due_day,
        installments=[],
    )

    if plan == PaymentPlan.INSTALLMENTS:
        financials.installments = build_installments(
            form.total_agreed,
            form.initial_payment or 0,
            form.num_installments,
            form.due_day,
            existing.installments if existing else None,
            today,
        )
    elif plan in (PaymentPlan.ON_SUCCESS, PaymentPlan.SOCIAL_SECURITY_MIX):
        contingent = case_type in (CaseType.LABOR, CaseType.SOCIAL_SECURITY)
        pct = form.success_fee_percentage
        if pct is None:
            pct = SUCCESS_FEE_DEFAULT_CONTINGENT if contingent else SUCCESS_FEE_DEFAULT
        financials.success_fee_percentage = pct
        financials.success_fee_status = existing.success_fee_status if existing else InstallmentStatus.PENDING
        financials.success_fee_paid_at = existing.success_fee_paid_at if existing else None
        financials.labor_final_value = form.labor_final_value
        financials.labor_payment_date = form.labor_payment_date
        if case_type == CaseType.SOCIAL_SECURITY:
            financials.benefit_installments_count = (
                form.benefit_installments_count
                if form.benefit_installments_count is not None
                else BENEFIT_INSTALLMENTS_DEFAULT
            )

    logger.info(f"Built {financials.plan.value} plan with {len(financials.installments)} installments")
    return financials


def rebuild_financials(
    financials: ClientFinancials,
    origin: ClientOrigin,
    case_type: CaseType,
    origin_changed: bool,
    today: Optional[date] = None
) -> ClientFinancials:
    """
    Re-derive a stored record after the client's origin or case type changed.

    Amounts and certificate data carry over. A new origin starts from its
    default plan and drops the payment history of the old scheme.
    """
    form_fields = set(PaymentPlanForm.model_fields)
    data = {
        field: value
        for field, value in financials.model_dump().items()
        if field in form_fields and value is not None
    }
    data["num_installments"] = max(len(financials.installments), 1)
    if origin_changed:
        data.pop("plan", None)
        data.pop("method", None)
        data.pop("initial_payment_status", None)

    form = PaymentPlanForm.model_validate(data)
    return build_financials(origin, case_type, form, None if origin_changed else financials, today)
