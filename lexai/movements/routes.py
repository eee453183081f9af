from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import date
import logging

from lexai.database import get_db
from lexai.models import User, Movement, MovementType, ActionType, EntityType
from lexai.auth.dependencies import get_current_user
from lexai.movements.schemas import (
    MovementCreate, MovementUpdate, MovementResponse, MovementWriteResponse,
    CriticalPage, CalendarDay, CalendarMonth
)
from lexai.services import agenda_service
from lexai.services.activity_service import record_activity
from lexai.services.calendar_service import GoogleCalendarService
from lexai.services.client_service import ClientService
from lexai.services.settings_service import get_or_create_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movements", tags=["Movements"])


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Movement {action} failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


def _get_owned_movement(db: Session, movement_id: str, user: User) -> Movement:
    movement = db.query(Movement).filter(
        Movement.id == movement_id,
        Movement.user_id == user.id
    ).first()
    if not movement:
        raise HTTPException(status_code=404, detail="Movement not found")
    return movement


def _calendar_for(db: Session, user: User) -> Optional[GoogleCalendarService]:
    profile = get_or_create_profile(db, user)
    if not profile.google_connected or not profile.google_token:
        return None
    return GoogleCalendarService(profile.google_token)


def _to_response(movement: Movement, names_by_case: dict) -> MovementResponse:
    """Serialize a movement; the linked client wins, case number equality is only a display fallback."""
    response = MovementResponse.model_validate(movement)
    if movement.client is not None:
        response.client_name = movement.client.name
    else:
        response.client_name = names_by_case.get(movement.case_number or "")
    return response


def _names_by_case(db: Session, user: User) -> dict:
    names = {}
    for client in ClientService(db).get_clients_for_user(user):
        if client.case_number:
            names.setdefault(client.case_number, client.name)
    return names


def _resolve_client_id(db: Session, user: User, client_id: Optional[str], case_number: Optional[str]) -> Optional[str]:
    service = ClientService(db)
    if client_id:
        if not service.get_client_for_user(client_id, user):
            raise HTTPException(status_code=404, detail="Client not found")
        return client_id
    matches = service.find_by_case_number(user, case_number)
    # Only an unambiguous case number links the movement
    return matches[0].id if len(matches) == 1 else None


def _sync(db: Session, movement: Movement, calendar: GoogleCalendarService) -> bool:
    event_id = calendar.create_event(movement)
    if not event_id:
        return False
    movement.synced_to_google = True
    movement.google_event_id = event_id
    _commit(db, "sync")
    return True

# =====================================================
# MOVEMENT CRUD OPERATIONS
# =====================================================

@router.post("/", response_model=MovementWriteResponse, status_code=201)
def create_movement(
    movement_data: MovementCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Schedule a hearing, deadline or notification, optionally pushing it to Google Calendar."""
    data = movement_data.dict(exclude={"sync_to_calendar"})
    data["client_id"] = _resolve_client_id(db, current_user, data.get("client_id"), data.get("case_number"))

    movement = Movement(user_id=current_user.id, **data)
    db.add(movement)
    db.flush()
    record_activity(
        db, current_user, ActionType.CREATE, EntityType.MOVEMENT,
        f"Evento \"{movement.description}\" agendado para {movement.date.strftime('%d/%m/%Y')}",
        entity_id=movement.id,
        details={"type": movement.type.value, "case_number": movement.case_number}
    )
    _commit(db, "creation")
    db.refresh(movement)

    calendar_synced = False
    message = f"O evento \"{movement.description}\" foi salvo."
    if movement_data.sync_to_calendar:
        calendar = _calendar_for(db, current_user)
        if calendar is None:
            message += " Google Agenda não conectada."
        else:
            calendar_synced = _sync(db, movement, calendar)
            if not calendar_synced:
                message += " Não foi possível sincronizar com o Google Agenda."

    return MovementWriteResponse(
        movement=_to_response(movement, _names_by_case(db, current_user)),
        calendar_synced=calendar_synced,
        message=message,
    )


@router.get("/", response_model=List[MovementResponse])
def list_movements(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    type: Optional[MovementType] = None,
    client_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = db.query(Movement).filter(Movement.user_id == current_user.id)

    if date_from:
        query = query.filter(Movement.date >= date_from)
    if date_to:
        query = query.filter(Movement.date <= date_to)
    if type:
        query = query.filter(Movement.type == type)
    if client_id:
        query = query.filter(Movement.client_id == client_id)

    movements = query.order_by(Movement.date, Movement.time).all()
    names = _names_by_case(db, current_user)
    return [_to_response(m, names) for m in movements]


@router.get("/critical", response_model=CriticalPage)
def list_critical_movements(
    page: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Upcoming deadlines and notifications, soonest first, a few per page."""
    movements = db.query(Movement).filter(Movement.user_id == current_user.id).all()
    critical = agenda_service.critical_movements(movements, date.today())
    items, total_pages = agenda_service.paginate(critical, page)

    names = _names_by_case(db, current_user)
    return CriticalPage(
        page=page,
        total_pages=total_pages,
        total=len(critical),
        items=[_to_response(m, names) for m in items],
    )


@router.get("/calendar", response_model=CalendarMonth)
def month_calendar(
    year: Optional[int] = Query(None, ge=1900, le=2999),
    month: Optional[int] = Query(None, ge=1, le=12),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Sunday-first month grid with the movements of each day."""
    today = date.today()
    year = year or today.year
    month = month or today.month

    weeks = agenda_service.month_grid(year, month)
    first, last = weeks[0][0], weeks[-1][-1]
    movements = db.query(Movement).filter(
        Movement.user_id == current_user.id,
        Movement.date >= first,
        Movement.date <= last
    ).all()

    names = _names_by_case(db, current_user)
    by_day = agenda_service.movements_by_day(movements)
    reference = date(year, month, 1)

    return CalendarMonth(
        year=year,
        month=month,
        weeks=[
            [
                CalendarDay(
                    date=day,
                    in_month=day.month == month,
                    is_today=day == today,
                    movements=[_to_response(m, names) for m in by_day.get(day.isoformat(), [])],
                )
                for day in week
            ]
            for week in weeks
        ],
        previous=agenda_service.shift_period(reference, "month", -1),
        next=agenda_service.shift_period(reference, "month", 1),
    )


@router.get("/{movement_id}", response_model=MovementResponse)
def get_movement(
    movement_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    movement = _get_owned_movement(db, movement_id, current_user)
    return _to_response(movement, _names_by_case(db, current_user))


@router.put("/{movement_id}", response_model=MovementWriteResponse)
def update_movement(
    movement_id: str,
    movement_update: MovementUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    movement = _get_owned_movement(db, movement_id, current_user)
    update_data = movement_update.dict(exclude_unset=True)
    relink_by_case = "case_number" in update_data and movement.client_id is None
    if "client_id" in update_data or relink_by_case:
        update_data["client_id"] = _resolve_client_id(
            db, current_user,
            update_data.get("client_id"),
            update_data.get("case_number", movement.case_number)
        )

    for field, value in update_data.items():
        setattr(movement, field, value)

    record_activity(
        db, current_user, ActionType.UPDATE, EntityType.MOVEMENT,
        f"Evento \"{movement.description}\" atualizado",
        entity_id=movement.id,
        details={"fields": sorted(update_data.keys())}
    )
    _commit(db, "update")
    db.refresh(movement)

    return MovementWriteResponse(
        movement=_to_response(movement, _names_by_case(db, current_user)),
        calendar_synced=movement.synced_to_google,
        message="As alterações na agenda foram salvas.",
    )


@router.delete("/{movement_id}", response_model=MovementWriteResponse)
def delete_movement(
    movement_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a movement; removing its Google Calendar event is best effort."""
    movement = _get_owned_movement(db, movement_id, current_user)

    calendar_synced = False
    calendar_failed = False
    if movement.google_event_id:
        calendar = _calendar_for(db, current_user)
        if calendar is not None:
            calendar_synced = calendar.delete_event(movement.google_event_id)
        calendar_failed = not calendar_synced

    record_activity(
        db, current_user, ActionType.DELETE, EntityType.MOVEMENT,
        f"Evento \"{movement.description}\" removido",
        entity_id=movement.id,
        details={"calendar_synced": calendar_synced}
    )
    db.delete(movement)
    _commit(db, "deletion")

    message = "O evento foi removido da agenda."
    if calendar_failed:
        message += " Não foi possível removê-lo do Google Agenda."
    return MovementWriteResponse(movement=None, calendar_synced=calendar_synced, message=message)


@router.post("/{movement_id}/sync", response_model=MovementWriteResponse)
def sync_movement(
    movement_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    movement = _get_owned_movement(db, movement_id, current_user)
    calendar = _calendar_for(db, current_user)
    if calendar is None:
        raise HTTPException(status_code=400, detail="Google Calendar is not connected")

    calendar_synced = _sync(db, movement, calendar)
    if calendar_synced:
        db.refresh(movement)
        message = "Evento sincronizado com o Google Agenda."
    else:
        message = "Não foi possível sincronizar com o Google Agenda."

    return MovementWriteResponse(
        movement=_to_response(movement, _names_by_case(db, current_user)),
        calendar_synced=calendar_synced,
        message=message,
    )
