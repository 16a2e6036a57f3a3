"""
JSON file helpers for the project store.

Project documents are rewritten on every save, so writes go through a
sibling temporary file and an os.replace; readers never see a partial file.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union

PathLike = Union[str, Path]


def atomic_write_json(file_path: PathLike, data: Any, indent: int = 2) -> None:
    """
    Write data as UTF-8 JSON, replacing file_path in one step.

    Args:
        file_path: Target document; missing parent directories are created
        data: JSON-serializable payload
        indent: Indentation of the written document

    Raises:
        OSError: If the directory or file cannot be written
        TypeError: If data is not JSON serializable (the target is left untouched)
    """
    target = Path(file_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(prefix=f".{target.stem}.", suffix=".tmp", dir=target.parent)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, target)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def read_json(file_path: PathLike) -> Any:
    """Load a UTF-8 JSON document. Decoding errors propagate as json.JSONDecodeError."""
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)
