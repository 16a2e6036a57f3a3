"""
Project state: overview, methodology, timeline, data table and saved citations.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional

import pandas as pd

from research_assistant.errors import ValidationError
from research_assistant.llm.schemas import GroundingChunk


def _pick(cls, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Keep only the keys cls declares, stringified."""
    data = data or {}
    return {f.name: str(data[f.name]) for f in fields(cls) if data.get(f.name) is not None}


@dataclass
class ProjectOverview:
    title: str = ""
    primary_questions: str = ""
    secondary_questions: str = ""
    primary_hypothesis: str = ""
    secondary_hypothesis: str = ""
    keywords: str = ""
    ethical_considerations: str = ""

    def update(self, **values: str) -> None:
        """Apply a partial update (e.g. an accepted AI suggestion); empty values are ignored."""
        for name, value in values.items():
            if not hasattr(self, name):
                raise ValidationError(f"Unknown project overview field: {name}")
            if value:
                setattr(self, name, value)


@dataclass
class StudyMethodology:
    study_type: str = ""
    inclusion_criteria: str = ""
    exclusion_criteria: str = ""
    primary_variables: str = ""
    secondary_variables: str = ""
    sampling_method: str = ""


@dataclass
class TimelineTask:
    id: int
    name: str
    start: str
    end: str
    progress: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.progress <= 100:
            raise ValidationError(f"Task progress must be between 0 and 100, got {self.progress}")


@dataclass
class DataTable:
    """Study data entered row by row under user-defined columns."""

    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)

    def add_column(self, name: str) -> None:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Column name cannot be empty")
        if name in self.columns:
            raise ValidationError(f"Column already exists: {name}")
        self.columns.append(name)
        for row in self.rows:
            row.setdefault(name, "")

    def remove_column(self, name: str) -> None:
        if name not in self.columns:
            return
        self.columns.remove(name)
        for row in self.rows:
            row.pop(name, None)

    def add_row(self, values: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        values = values or {}
        row = {column: str(values.get(column, "")) for column in self.columns}
        self.rows.append(row)
        return row

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.columns).fillna("")

    def to_csv(self) -> str:
        """Export the table as CSV text with a header row."""
        return self.to_frame().to_csv(index=False)


@dataclass
class ProjectState:
    overview: ProjectOverview = field(default_factory=ProjectOverview)
    methodology: StudyMethodology = field(default_factory=StudyMethodology)
    tasks: List[TimelineTask] = field(default_factory=list)
    data: DataTable = field(default_factory=DataTable)
    citations: List[GroundingChunk] = field(default_factory=list)

    def add_citation(self, source: GroundingChunk) -> bool:
        """Save a source unless one with the same URI is already saved."""
        if any(c.uri == source.uri for c in self.citations):
            return False
        self.citations.append(source)
        return True

    def remove_citation(self, uri: str) -> None:
        self.citations = [c for c in self.citations if c.uri != uri]

    def bibliography(self) -> str:
        entries = [
            f"{i}. {c.title or 'Untitled'}. Retrieved from {c.uri}"
            for i, c in enumerate(self.citations, 1)
        ]
        return "\n\n".join(entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overview": asdict(self.overview),
            "methodology": asdict(self.methodology),
            "tasks": [asdict(t) for t in self.tasks],
            "data": {"columns": list(self.data.columns), "rows": [dict(r) for r in self.data.rows]},
            "citations": [c.to_dict() for c in self.citations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectState":
        data = data or {}
        table = data.get("data") or {}
        citations = [GroundingChunk.from_mapping(c) for c in data.get("citations") or []]
        return cls(
            overview=ProjectOverview(**_pick(ProjectOverview, data.get("overview"))),
            methodology=StudyMethodology(**_pick(StudyMethodology, data.get("methodology"))),
            tasks=[
                TimelineTask(
                    id=int(t["id"]),
                    name=str(t.get("name", "")),
                    start=str(t.get("start", "")),
                    end=str(t.get("end", "")),
                    progress=int(t.get("progress", 0)),
                )
                for t in data.get("tasks") or []
            ],
            data=DataTable(
                columns=[str(c) for c in table.get("columns") or []],
                rows=[{str(k): str(v) for k, v in row.items()} for row in table.get("rows") or []],
            ),
            citations=[c for c in citations if c is not None],
        )


def initial_state() -> ProjectState:
    """State of a freshly created project."""
    return ProjectState(
        tasks=[
            TimelineTask(id=1, name="Protocol Writing", start="2024-08-01", end="2024-08-15", progress=50),
            TimelineTask(id=2, name="Ethics Committee Submission", start="2024-08-16", end="2024-08-20", progress=20),
            TimelineTask(id=3, name="Data Collection", start="2024-09-01", end="2024-11-30", progress=0),
        ],
        data=DataTable(
            columns=["PatientID", "Age", "Sex"],
            rows=[
                {"PatientID": "P001", "Age": "28", "Sex": "F"},
                {"PatientID": "P002", "Age": "34", "Sex": "M"},
            ],
        ),
    )
