"""
Tests for project state and the file-backed ProjectStore.
"""

import json

import pandas as pd
import pytest

from research_assistant.core.project import DataTable, ProjectState, TimelineTask, initial_state
from research_assistant.core.store import SCHEMA_VERSION, ProjectStore, project_slug
from research_assistant.errors import StoreError, ValidationError
from research_assistant.llm.schemas import GroundingChunk
from research_assistant.utils.io import atomic_write_json


@pytest.fixture
def store(tmp_path):
    return ProjectStore(tmp_path)


def test_project_slug():
    assert project_slug("  Neonatal Sepsis (2024)! ") == "neonatal_sepsis_2024"
    with pytest.raises(ValidationError):
        project_slug("!!!")


def test_load_missing_returns_initial_state(store):
    state = store.load("new project")
    assert [t.name for t in state.tasks] == [
        "Protocol Writing",
        "Ethics Committee Submission",
        "Data Collection",
    ]
    assert state.data.columns == ["PatientID", "Age", "Sex"]
    assert state.citations == []
    assert not store.exists("new project")


def test_save_and_load_round_trip(store):
    state = initial_state()
    state.overview.update(title="Lactate in sepsis", primary_hypothesis="Lactate predicts mortality")
    state.methodology.study_type = "Prospective cohort"
    state.data.add_column("Lactate")
    state.data.add_row({"PatientID": "P003", "Age": "61", "Sex": "M", "Lactate": "4.2"})
    state.add_citation(GroundingChunk(uri="https://a.org", title="A"))

    path = store.save("Lactate Study", state)
    assert path == store.path_for("Lactate Study")

    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["schema_version"] == SCHEMA_VERSION
    assert document["name"] == "Lactate Study"

    loaded = store.load("Lactate Study")
    assert loaded == state
    assert loaded.data.rows[0]["Lactate"] == ""
    assert loaded.data.rows[-1]["Lactate"] == "4.2"


def test_corrupt_document_raises(store):
    path = store.path_for("broken")
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError, match="broken"):
        store.load("broken")


def test_delete_and_list(store):
    assert store.list_projects() == []
    store.save("Beta", initial_state())
    store.save("Alpha", initial_state())
    assert store.list_projects() == ["alpha", "beta"]

    assert store.delete("Alpha") is True
    assert store.delete("Alpha") is False
    assert store.list_projects() == ["beta"]


def test_overview_update_ignores_empty_values():
    state = ProjectState()
    state.overview.update(title="T", keywords="")
    state.overview.update(title="")
    assert state.overview.title == "T"
    with pytest.raises(ValidationError):
        state.overview.update(unknown="x")


def test_task_progress_range():
    with pytest.raises(ValidationError):
        TimelineTask(id=9, name="Analysis", start="2024-12-01", end="2024-12-31", progress=120)


def test_data_table_columns():
    table = DataTable(columns=["ID"], rows=[{"ID": "1"}])
    table.add_column("Weight")
    assert table.rows == [{"ID": "1", "Weight": ""}]
    with pytest.raises(ValidationError):
        table.add_column("Weight")
    with pytest.raises(ValidationError):
        table.add_column("  ")
    table.remove_column("ID")
    assert table.columns == ["Weight"]
    assert table.rows == [{"Weight": ""}]


def test_csv_export():
    csv = initial_state().data.to_csv()
    assert csv.splitlines() == ["PatientID,Age,Sex", "P001,28,F", "P002,34,M"]


def test_to_frame():
    frame = initial_state().data.to_frame()
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ["PatientID", "Age", "Sex"]
    assert len(frame) == 2


def test_citations_dedupe_and_bibliography():
    state = ProjectState()
    assert state.add_citation(GroundingChunk(uri="https://a.org", title="First"))
    assert not state.add_citation(GroundingChunk(uri="https://a.org", title="Duplicate"))
    state.add_citation(GroundingChunk(uri="https://b.org"))

    assert state.bibliography() == (
        "1. First. Retrieved from https://a.org\n\n"
        "2. Untitled. Retrieved from https://b.org"
    )

    state.remove_citation("https://a.org")
    assert [c.uri for c in state.citations] == ["https://b.org"]


def test_from_dict_tolerates_partial_documents():
    state = ProjectState.from_dict({
        "overview": {"title": "Only a title", "bogus": "dropped"},
        "citations": [{"web": {"uri": "https://a.org"}}, {"web": {}}],
    })
    assert state.overview.title == "Only a title"
    assert state.tasks == []
    assert [c.uri for c in state.citations] == ["https://a.org"]


def test_failed_write_keeps_previous_document(store):
    path = store.save("Lactate Study", initial_state())
    before = path.read_text(encoding="utf-8")

    with pytest.raises(TypeError):
        atomic_write_json(path, {"state": object()})

    assert path.read_text(encoding="utf-8") == before
    assert [p.name for p in path.parent.iterdir()] == [path.name]
    assert store.load("Lactate Study") == initial_state()
