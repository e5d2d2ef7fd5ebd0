from datetime import datetime
from app.models.meeting import Meeting
from app.schemas.meeting import MeetingOut
from app.services.entity_service import EndableEntityService, whole_minutes


class MeetingService(EndableEntityService):
    model = Meeting
    out_schema = MeetingOut
    resource = "Meeting"

    def _apply_end(self, meeting: Meeting, now: datetime) -> None:
        meeting.end_date = now
        meeting.minutes_duration = whole_minutes(meeting.start_date, meeting.end_date)
