"""Project state and its file-backed store."""

from research_assistant.core.project import (
    DataTable,
    ProjectOverview,
    ProjectState,
    StudyMethodology,
    TimelineTask,
    initial_state,
)
from research_assistant.core.store import ProjectStore

__all__ = [
    "DataTable",
    "ProjectOverview",
    "ProjectState",
    "StudyMethodology",
    "TimelineTask",
    "initial_state",
    "ProjectStore",
]
