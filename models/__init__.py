"""Domain records exposed by the Final Buzzer application."""
from .countdown import CountdownPhase, CountdownState
from .study_task import StudyTask

__all__ = ["CountdownPhase", "CountdownState", "StudyTask"]
