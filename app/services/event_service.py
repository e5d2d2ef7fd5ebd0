from datetime import datetime
from app.models.enums import EventType
from app.models.event import Event
from app.schemas.event import EventOut
from app.services.entity_service import EndableEntityService, whole_minutes


class EventService(EndableEntityService):
    model = Event
    out_schema = EventOut
    resource = "Event"

    def _apply_end(self, event: Event, now: datetime) -> None:
        event.type = EventType.END_FOCUS_SESSION
        event.end_date = now
        event.duration = whole_minutes(event.start_date, event.end_date)
