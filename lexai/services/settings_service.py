from sqlalchemy.orm import Session
from typing import Optional
import logging

from lexai.models import Profile, User

logger = logging.getLogger(__name__)


def get_or_create_profile(db: Session, user: User) -> Profile:
    """Return the user's settings row, staging an empty one when missing."""
    profile = db.query(Profile).filter(Profile.id == user.id).first()
    if profile is None:
        profile = Profile(id=user.id, name=user.name, email=user.email)
        db.add(profile)
    return profile


def shared_logo(db: Session, user: User) -> Optional[str]:
    """A logo published by another user who opted in to sharing it."""
    donor = (
        db.query(Profile)
        .filter(Profile.id != user.id, Profile.share_logo.is_(True), Profile.logo.isnot(None), Profile.logo != "")
        .first()
    )
    return donor.logo if donor else None


def apply_logo_fallback(db: Session, user: User, profile: Profile) -> bool:
    """Copy a shared logo into a profile that has none. Returns True when copied."""
    if profile.logo:
        return False
    logo = shared_logo(db, user)
    if not logo:
        return False
    profile.logo = logo
    logger.info(f"Shared logo applied to settings of user {user.id}")
    return True
