import logging
import uuid
from datetime import date, datetime, time
from typing import Iterable
from opentelemetry.trace import Tracer
from sqlalchemy import and_
from sqlalchemy.orm import Session
from app.core.tracing import set_span_attributes
from app.models.enums import EventType, TaskSituation
from app.models.event import Event
from app.models.meeting import Meeting
from app.models.task import Task
from app.schemas.report import Report

logger = logging.getLogger("tracker.report_service")


def completion_percentage(completed: int, total: int) -> float:
    if total == 0:
        return 0
    return round(completed * 100 / total, 2)


def aggregate(
    user_id: uuid.UUID,
    start_date: date,
    end_date: date,
    tasks: Iterable[Task],
    meetings: Iterable[Meeting],
    events: Iterable[Event],
) -> Report:
    """Fold already-filtered rows into a Report."""
    tasks = list(tasks)
    completed = sum(1 for t in tasks if t.situation == TaskSituation.COMPLETED)
    in_progress = sum(1 for t in tasks if t.situation == TaskSituation.IN_PROGRESS)

    return Report(
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        completed_tasks=completed,
        in_progress_tasks=in_progress,
        finished_meetings=sum(1 for m in meetings if m.end_date is not None),
        focus_minutes=sum(e.duration for e in events if e.type == EventType.END_FOCUS_SESSION),
        completion_percentage=completion_percentage(completed, len(tasks)),
    )


class ReportService:
    def __init__(self, db: Session, tracer: Tracer):
        self.db = db
        self.tracer = tracer

    def build_report(self, user_id: uuid.UUID, start_date: date, end_date: date) -> Report:
        """
        Productivity counters for one user over an inclusive calendar range.

        Every entity must both start and finish inside the range, so open tasks
        (no final date) and running meetings/sessions are never counted.
        Unknown users get a zero-filled report.
        """
        with self.tracer.start_as_current_span("ReportService.build_report") as span:
            start_ts = datetime.combine(start_date, time.min)
            end_ts = datetime.combine(end_date, time.max)

            tasks = self.db.query(Task).filter(
                and_(
                    Task.user_id == user_id,
                    Task.created_at >= start_ts,
                    Task.final_date <= end_ts,
                )
            ).all()

            meetings = self.db.query(Meeting).filter(
                and_(
                    Meeting.user_id == user_id,
                    Meeting.start_date >= start_ts,
                    Meeting.end_date <= end_ts,
                )
            ).all()

            events = self.db.query(Event).filter(
                and_(
                    Event.user_id == user_id,
                    Event.start_date >= start_ts,
                    Event.end_date <= end_ts,
                )
            ).all()

            report = aggregate(user_id, start_date, end_date, tasks, meetings, events)

            set_span_attributes(span, {
                "report.user_id": user_id,
                "report.start_date": start_date.isoformat(),
                "report.end_date": end_date.isoformat(),
                "report.task_count": len(tasks),
                "report.meeting_count": len(meetings),
                "report.event_count": len(events),
                "report.completion_percentage": report.completion_percentage,
            })
            logger.info(
                "Report generated",
                extra={
                    "user_id": str(user_id),
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                },
            )
            return report

    def total_task_count(self) -> int:
        return self.db.query(Task).count()
