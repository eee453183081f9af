from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from lexai.config import LOGO_MAX_BYTES
from lexai.database import get_db
from lexai.models import User, ActionType, EntityType
from lexai.auth.dependencies import get_current_user
from lexai.settings.schemas import SettingsUpdate, SettingsResponse, GoogleConnect
from lexai.services.activity_service import record_activity
from lexai.services.settings_service import get_or_create_profile, apply_logo_fallback

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


def _commit(db: Session):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Settings persistence failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/", response_model=SettingsResponse)
def get_settings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Load the user's settings; an office logo shared by a colleague fills an empty one."""
    profile = get_or_create_profile(db, current_user)
    apply_logo_fallback(db, current_user, profile)
    if db.new or db.dirty:
        _commit(db)
        db.refresh(profile)
    return profile


@router.put("/", response_model=SettingsResponse)
def update_settings(
    settings_data: SettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    update_data = settings_data.dict(exclude_unset=True)
    logo = update_data.get("logo")
    # base64 inflates by 4/3
    if logo and len(logo) * 3 / 4 > LOGO_MAX_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Logo exceeds the {LOGO_MAX_BYTES // (1024 * 1024)}MB limit"
        )

    profile = get_or_create_profile(db, current_user)
    for field, value in update_data.items():
        setattr(profile, field, value)

    record_activity(
        db, current_user, ActionType.UPDATE, EntityType.PROFILE,
        "Configurações do perfil atualizadas",
        entity_id=current_user.id,
        details={"fields": sorted(update_data.keys())}
    )
    _commit(db)
    db.refresh(profile)
    return profile


@router.post("/google", response_model=SettingsResponse)
def connect_google_calendar(
    payload: GoogleConnect,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Store the calendar access token obtained by the client-side consent flow."""
    profile = get_or_create_profile(db, current_user)
    profile.google_token = payload.access_token
    profile.google_email = payload.email
    profile.google_connected = True

    record_activity(
        db, current_user, ActionType.UPDATE, EntityType.PROFILE,
        "Google Agenda conectada",
        entity_id=current_user.id
    )
    _commit(db)
    db.refresh(profile)
    return profile


@router.delete("/google", response_model=SettingsResponse)
def disconnect_google_calendar(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    profile = get_or_create_profile(db, current_user)
    profile.google_token = None
    profile.google_email = None
    profile.google_connected = False

    record_activity(
        db, current_user, ActionType.UPDATE, EntityType.PROFILE,
        "Google Agenda desconectada",
        entity_id=current_user.id
    )
    _commit(db)
    db.refresh(profile)
    return profile
