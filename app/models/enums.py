import enum


class Priority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskSituation(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class EventType(str, enum.Enum):
    START_FOCUS_SESSION = "START_FOCUS_SESSION"
    END_FOCUS_SESSION = "END_FOCUS_SESSION"
