import requests
import logging
from datetime import timedelta
from typing import Optional

from lexai.config import GOOGLE_CALENDAR_API_BASE, CALENDAR_TIMEOUT_SECONDS
from lexai.models import MovementType

logger = logging.getLogger(__name__)

# Google Calendar color ids
HEARING_COLOR = "9"
DEADLINE_COLOR = "5"


def build_event(movement) -> dict:
    """Translate a court movement into a Google Calendar all-day event."""
    is_hearing = movement.type == MovementType.HEARING
    kind = "Audiência" if is_hearing else "Prazo/Notificação"
    description = (
        f"Processo: {movement.case_number}\n"
        f"Tipo: {kind}\n"
        f"Descrição: {movement.description}\n"
        f"Fonte: {movement.source or ''}\n\n"
        "Sincronizado via LexAI Management."
    )

    return {
        "summary": f"{'AUDIÊNCIA' if is_hearing else 'PRAZO'}: Proc. {movement.case_number}",
        "location": movement.source or "Tribunal",
        "description": description,
        # All-day events end on the following day (exclusive)
        "start": {"date": movement.date.isoformat()},
        "end": {"date": (movement.date + timedelta(days=1)).isoformat()},
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": 24 * 60},
                {"method": "popup", "minutes": 60},
            ],
        },
        "colorId": HEARING_COLOR if is_hearing else DEADLINE_COLOR,
    }


class GoogleCalendarService:
    def __init__(self, access_token: str, base_url: str = GOOGLE_CALENDAR_API_BASE):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        })

    def create_event(self, movement) -> Optional[str]:
        """Create an event and return its id, or None when the sync failed."""
        event = build_event(movement)
        try:
            response = self.session.post(
                f"{self.base_url}/calendars/primary/events",
                json=event,
                timeout=CALENDAR_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            event_id = response.json().get("id")
            logger.info(f"Calendar event created: {event['summary']}")
            return event_id
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Google Calendar sync failed: {str(e)}")
            return None

    def delete_event(self, event_id: str) -> bool:
        try:
            response = self.session.delete(
                f"{self.base_url}/calendars/primary/events/{event_id}",
                timeout=CALENDAR_TIMEOUT_SECONDS,
            )
            # 410 means the event is already gone
            if response.status_code in (200, 204, 410):
                return True
            logger.warning(f"Calendar delete returned {response.status_code} for event {event_id}")
            return False
        except requests.RequestException as e:
            logger.error(f"Google Calendar delete failed: {str(e)}")
            return False
