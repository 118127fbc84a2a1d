import json
from pathlib import Path
from typing import Any, Union

PathLike = Union[str, Path]


def load_json(file_path: PathLike) -> Any:
    """Load and parse a JSON file"""
    with open(file_path, "r", encoding="utf-8") as file:
        return json.load(file)


def dump_json(data: Any, file_path: PathLike) -> Path:
    """
    Write data as pretty-printed JSON (2-space indent, trailing newline).

    Parent directories are created when missing. The file is overwritten.

    Returns:
        The path that was written
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as file:
        file.write(json.dumps(data, indent=2) + "\n")
    return path
