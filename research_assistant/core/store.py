"""
File-backed project repository.

Key schema: every project is one JSON document at

    <root>/projects/<slug>.json

where <slug> is the project name lower-cased with runs of characters
outside [a-z0-9_-] replaced by "_".
"""

import json
import logging
import re
from pathlib import Path
from typing import List, Union

from research_assistant.core.project import ProjectState, initial_state
from research_assistant.errors import StoreError, ValidationError
from research_assistant.utils.io import atomic_write_json, read_json

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def project_slug(name: str) -> str:
    slug = re.sub(r"[^a-z0-9_-]+", "_", (name or "").strip().lower()).strip("_")
    if not slug:
        raise ValidationError(f"Invalid project name: {name!r}")
    return slug


class ProjectStore:
    """Load and save ProjectState documents under a root directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.projects_dir = self.root / "projects"

    def path_for(self, name: str) -> Path:
        return self.projects_dir / f"{project_slug(name)}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def load(self, name: str) -> ProjectState:
        """
        Load a project, or a fresh initial state if it was never saved.

        Raises:
            StoreError: If the stored document cannot be parsed
        """
        path = self.path_for(name)
        if not path.exists():
            logger.debug(f"No saved project at {path}; using initial state")
            return initial_state()
        try:
            document = read_json(path)
            return ProjectState.from_dict(document.get("state", {}))
        except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Could not load project {name!r} from {path}: {e}") from e

    def save(self, name: str, state: ProjectState) -> Path:
        path = self.path_for(name)
        document = {"schema_version": SCHEMA_VERSION, "name": name, "state": state.to_dict()}
        try:
            atomic_write_json(path, document)
        except OSError as e:
            raise StoreError(f"Could not save project {name!r} to {path}: {e}") from e
        logger.info(f"Saved project {name!r} to {path}")
        return path

    def delete(self, name: str) -> bool:
        """Remove a saved project (the "reset" action). Returns False if nothing was stored."""
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_projects(self) -> List[str]:
        if not self.projects_dir.exists():
            return []
        return sorted(p.stem for p in self.projects_dir.glob("*.json"))
