from datetime import datetime
from app.models.enums import TaskSituation
from app.models.task import Task
from app.schemas.task import TaskOut
from app.services.entity_service import EndableEntityService, whole_minutes


class TaskService(EndableEntityService):
    model = Task
    out_schema = TaskOut
    resource = "Task"

    def _apply_end(self, task: Task, now: datetime) -> None:
        # Ending an already completed task just re-stamps it
        task.situation = TaskSituation.COMPLETED
        task.final_date = now
        task.spent_minutes = max(whole_minutes(task.created_at, task.final_date), 0)
